from __future__ import annotations

import os
import re
import time

_OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$")


def new_object_id() -> str:
    """24-hex identifier: 4-byte epoch seconds followed by 8 random bytes.

    Same shape as a document-store ObjectId, so ids sort roughly by creation time.
    """

    return int(time.time()).to_bytes(4, "big").hex() + os.urandom(8).hex()


def is_object_id(value: object) -> bool:
    return isinstance(value, str) and bool(_OBJECT_ID_RE.match(value))
