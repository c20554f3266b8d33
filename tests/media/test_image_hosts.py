import pytest
from botocore.exceptions import ClientError

from school_attendance.core.exceptions import UploadError
from school_attendance.media.image_host import ImageUpload, LocalImageHost
from school_attendance.media.s3_image_host import S3ImageHost


class FakeS3Client:
    def __init__(self, fail: bool = False):
        self.calls = []
        self._fail = fail

    def put_object(self, **kwargs):
        if self._fail:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        self.calls.append(kwargs)
        return {}


def jpeg(name="board.jpg") -> ImageUpload:
    return ImageUpload(filename=name, content_type="image/jpeg", data=b"\xff\xd8data")


def test_s3_upload_returns_public_url():
    client = FakeS3Client()
    host = S3ImageHost("school-photos", prefix="attendance-checker/", client=client)

    url = host.upload(jpeg())

    (call,) = client.calls
    assert call["Bucket"] == "school-photos"
    assert call["Key"].startswith("attendance-checker/") and call["Key"].endswith(".jpg")
    assert call["Body"] == b"\xff\xd8data"
    assert url == f"https://school-photos.s3.amazonaws.com/{call['Key']}"


def test_s3_upload_uses_base_url_when_configured():
    client = FakeS3Client()
    host = S3ImageHost("b", prefix="p/", base_url="https://cdn.example.com/", client=client)

    url = host.upload(jpeg())

    assert url == "https://cdn.example.com/" + client.calls[0]["Key"]


def test_s3_failure_becomes_upload_error():
    host = S3ImageHost("b", client=FakeS3Client(fail=True))

    with pytest.raises(UploadError):
        host.upload(jpeg())


def test_local_host_writes_file(tmp_path):
    host = LocalImageHost(tmp_path / "uploads")

    url = host.upload(ImageUpload(filename="x.png", content_type="image/png", data=b"png"))

    name = url.rsplit("/", 1)[1]
    assert url.startswith("/uploads/") and name.endswith(".png")
    assert (tmp_path / "uploads" / name).read_bytes() == b"png"


def test_local_host_failure_becomes_upload_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(UploadError):
        LocalImageHost(blocker).upload(jpeg())


def test_empty_upload_detection():
    assert ImageUpload(filename="undefined", content_type="image/jpeg", data=b"x").is_empty
    assert ImageUpload(filename="a.jpg", content_type="image/jpeg", data=b"").is_empty
    assert not jpeg().is_empty
