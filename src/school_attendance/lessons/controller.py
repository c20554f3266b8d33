from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.result import OperationResult
from ..common.web import error_response, result_response, role_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _requested_day() -> date:
        value = request.args.get("date")
        if not value:
            return date.today()
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")

    def _week_response(views):
        return result_response(
            OperationResult.ok("OK", lessons=[v.to_dict(container.normalizer) for v in views])
        )

    @app.route("/admin/lessons", methods=["GET"], endpoint="admin_lessons")
    @role_required(Role.ADMIN)
    def admin_lessons(ctx):
        try:
            views = container.lesson_service.week_for_admin(ctx, _requested_day())
        except Exception as e:
            return error_response(e, action="load lessons")
        return _week_response(views)

    @app.route("/admin/lessons/<lesson_id>/cancel", methods=["POST"], endpoint="admin_lessons_cancel")
    @role_required(Role.ADMIN)
    def admin_lessons_cancel(ctx, lesson_id: str):
        try:
            container.lesson_service.cancel_lesson(ctx, lesson_id=lesson_id)
        except Exception as e:
            return error_response(e, action="cancel lesson")
        return result_response(OperationResult.ok("Lesson cancelled"))

    @app.route("/teacher/lessons", methods=["GET"], endpoint="teacher_lessons")
    @role_required(Role.TEACHER)
    def teacher_lessons(ctx):
        try:
            views = container.lesson_service.week_for_teacher(ctx, _requested_day())
        except Exception as e:
            return error_response(e, action="load lessons")
        return _week_response(views)

    @app.route("/parent/lessons", methods=["GET"], endpoint="parent_lessons")
    @role_required(Role.PARENT)
    def parent_lessons(ctx):
        try:
            views = container.lesson_service.week_for_parent(ctx, _requested_day())
        except Exception as e:
            return error_response(e, action="load lessons")
        return _week_response(views)
