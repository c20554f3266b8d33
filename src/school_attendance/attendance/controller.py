from __future__ import annotations

from flask import Flask, request

from ..common.result import OperationResult
from ..common.web import error_response, json_field, request_data, result_response, role_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..media.image_host import ImageUpload


def register(app: Flask, container: Container) -> None:
    def _read_uploads() -> list[ImageUpload]:
        uploads: list[ImageUpload] = []
        for file in request.files.getlist("photos"):
            uploads.append(
                ImageUpload(
                    filename=file.filename or "",
                    content_type=file.mimetype or "application/octet-stream",
                    data=file.read(),
                )
            )
        return uploads

    @app.route("/teacher/lessons/<lesson_id>/attendance", methods=["POST"], endpoint="teacher_attendance")
    @role_required(Role.TEACHER)
    def teacher_attendance(ctx, lesson_id: str):
        data = request_data()
        try:
            existing = json_field(data, "existingPhotos", [])
            if not isinstance(existing, list) or not all(isinstance(u, str) for u in existing):
                raise ValidationError("existingPhotos must be a list of URLs")

            lesson = container.attendance_recorder.record_attendance(
                ctx,
                lesson_id=lesson_id,
                attendance_map=json_field(data, "attendanceMap", required=True),
                existing_photos=existing,
                new_photos=_read_uploads(),
            )
        except Exception as e:
            return error_response(e, action="save the report")

        return result_response(
            OperationResult.ok(
                "Report saved successfully",
                status=lesson.status.value,
                photos=list(lesson.photos),
            )
        )
