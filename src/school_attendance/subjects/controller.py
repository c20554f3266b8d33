from __future__ import annotations

from flask import Flask

from ..common.result import OperationResult
from ..common.web import error_response, json_field, request_data, result_response, role_required
from ..core.enums import Role
from ..container import Container


def _subject_dict(s) -> dict:
    return {
        "id": s.subject_id,
        "name": s.name,
        "teacherId": s.teacher_id,
        "studentIds": list(s.student_ids),
        "schedule": [
            {"dayOfWeek": r.day_of_week, "startTime": r.start_time, "endTime": r.end_time} for r in s.schedule
        ],
        "startDate": s.start_date.isoformat(),
        "periodicityEndDate": s.periodicity_end_date.isoformat(),
        "active": s.active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/subjects", methods=["GET"], endpoint="admin_subjects")
    @role_required(Role.ADMIN)
    def admin_subjects(ctx):
        try:
            subjects = container.subject_service.list_subjects(ctx)
        except Exception as e:
            return error_response(e, action="load subjects")
        return result_response(OperationResult.ok("OK", subjects=[_subject_dict(s) for s in subjects]))

    @app.route("/admin/subjects", methods=["POST"], endpoint="admin_subjects_create")
    @role_required(Role.ADMIN)
    def admin_subjects_create(ctx):
        data = request_data()
        try:
            created = container.subject_service.create_subject(
                ctx,
                name=data.get("name", ""),
                teacher_id=data.get("teacherId", ""),
                student_ids=json_field(data, "studentIds", required=True),
                schedule=json_field(data, "schedule", required=True),
                start_date=data.get("startDate", ""),
                end_date=data.get("periodicityEndDate", ""),
            )
        except Exception as e:
            return error_response(e, action="create subject")
        return result_response(
            OperationResult.ok(
                "Subject and schedule created successfully",
                id=created.subject.subject_id,
                lessonCount=created.lesson_count,
            ),
            201,
        )

    @app.route("/admin/subjects/<subject_id>", methods=["POST"], endpoint="admin_subjects_update")
    @role_required(Role.ADMIN)
    def admin_subjects_update(ctx, subject_id: str):
        data = request_data()
        try:
            updated = container.subject_service.update_subject(
                ctx,
                subject_id=subject_id,
                name=data.get("name", ""),
                teacher_id=data.get("teacherId", ""),
                student_ids=json_field(data, "studentIds", required=True),
            )
        except Exception as e:
            return error_response(e, action="update subject")
        return result_response(OperationResult.ok("Subject updated", updatedLessons=updated))

    @app.route("/admin/subjects/<subject_id>/delete", methods=["POST"], endpoint="admin_subjects_delete")
    @role_required(Role.ADMIN)
    def admin_subjects_delete(ctx, subject_id: str):
        try:
            deleted = container.subject_service.delete_subject(ctx, subject_id=subject_id)
        except Exception as e:
            return error_response(e, action="delete subject")
        return result_response(OperationResult.ok("Subject deleted", deletedLessons=deleted))
