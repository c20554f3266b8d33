from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class OperationResult:
    """Uniform outcome returned at the operation boundary.

    Every command either fully applies (`error=False`) or reports failure
    with a user-visible message (`error=True`). There is no partial-success shape.
    """

    message: str
    error: bool = False
    data: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def ok(cls, message: str, **data: Any) -> "OperationResult":
        return cls(message=message, error=False, data=data or None)

    @classmethod
    def failure(cls, message: str) -> "OperationResult":
        return cls(message=message, error=True)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"message": self.message, "error": self.error}
        if self.data:
            out.update(self.data)
        return out
