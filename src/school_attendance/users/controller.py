from __future__ import annotations

from flask import Flask, session

from ..common.result import OperationResult
from ..common.web import error_response, json_field, request_data, result_response, role_required, store_session
from ..core.enums import Role
from ..container import Container


def _teacher_dict(t) -> dict:
    return {"id": t.teacher_id, "fullName": t.full_name, "phone": t.phone}


def _student_dict(s) -> dict:
    return {"id": s.student_id, "fullName": s.full_name}


def _parent_dict(p) -> dict:
    return {"id": p.parent_id, "fullName": p.full_name, "phone": p.phone, "studentIds": list(p.student_ids)}


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        try:
            ctx = container.auth_service.authenticate(data.get("login", ""), data.get("password", ""))
        except Exception as e:
            return error_response(e, action="log in")

        store_session(ctx)
        return result_response(OperationResult.ok("Success", role=ctx.role.value, redirectUrl=ctx.home_path))

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return result_response(OperationResult.ok("Logged out", redirectUrl="/login"))

    # ----- teachers -----

    @app.route("/admin/teachers", methods=["GET"], endpoint="admin_teachers")
    @role_required(Role.ADMIN)
    def admin_teachers(ctx):
        try:
            teachers = container.teacher_service.list_teachers(ctx)
        except Exception as e:
            return error_response(e, action="load teachers")
        return result_response(OperationResult.ok("OK", teachers=[_teacher_dict(t) for t in teachers]))

    @app.route("/admin/teachers", methods=["POST"], endpoint="admin_teachers_create")
    @role_required(Role.ADMIN)
    def admin_teachers_create(ctx):
        data = request_data()
        try:
            teacher_id = container.teacher_service.create_teacher(
                ctx,
                full_name=data.get("fullName", ""),
                phone=data.get("phone", ""),
                password=data.get("password", ""),
            )
        except Exception as e:
            return error_response(e, action="create teacher")
        return result_response(OperationResult.ok("Teacher created successfully", id=teacher_id), 201)

    @app.route("/admin/teachers/<teacher_id>", methods=["POST"], endpoint="admin_teachers_update")
    @role_required(Role.ADMIN)
    def admin_teachers_update(ctx, teacher_id: str):
        data = request_data()
        try:
            container.teacher_service.update_teacher(
                ctx,
                teacher_id=teacher_id,
                full_name=data.get("fullName", ""),
                phone=data.get("phone", ""),
                password=data.get("password") or None,
            )
        except Exception as e:
            return error_response(e, action="update teacher")
        return result_response(OperationResult.ok("Teacher updated successfully"))

    @app.route("/admin/teachers/<teacher_id>/delete", methods=["POST"], endpoint="admin_teachers_delete")
    @role_required(Role.ADMIN)
    def admin_teachers_delete(ctx, teacher_id: str):
        try:
            container.teacher_service.delete_teacher(ctx, teacher_id=teacher_id)
        except Exception as e:
            return error_response(e, action="delete teacher")
        return result_response(OperationResult.ok("Teacher deleted successfully"))

    # ----- students -----

    @app.route("/admin/students", methods=["GET"], endpoint="admin_students")
    @role_required(Role.ADMIN)
    def admin_students(ctx):
        try:
            students = container.student_service.list_students(ctx)
        except Exception as e:
            return error_response(e, action="load students")
        return result_response(OperationResult.ok("OK", students=[_student_dict(s) for s in students]))

    @app.route("/admin/students", methods=["POST"], endpoint="admin_students_create")
    @role_required(Role.ADMIN)
    def admin_students_create(ctx):
        data = request_data()
        try:
            student_id = container.student_service.create_student(ctx, full_name=data.get("fullName", ""))
        except Exception as e:
            return error_response(e, action="create student")
        return result_response(OperationResult.ok("Student created successfully", id=student_id), 201)

    @app.route("/admin/students/<student_id>/delete", methods=["POST"], endpoint="admin_students_delete")
    @role_required(Role.ADMIN)
    def admin_students_delete(ctx, student_id: str):
        try:
            container.student_service.delete_student(ctx, student_id=student_id)
        except Exception as e:
            return error_response(e, action="delete student")
        return result_response(OperationResult.ok("Student deleted successfully"))

    # ----- parents -----

    @app.route("/admin/parents", methods=["GET"], endpoint="admin_parents")
    @role_required(Role.ADMIN)
    def admin_parents(ctx):
        try:
            parents = container.parent_service.list_parents(ctx)
        except Exception as e:
            return error_response(e, action="load parents")
        return result_response(OperationResult.ok("OK", parents=[_parent_dict(p) for p in parents]))

    @app.route("/admin/parents", methods=["POST"], endpoint="admin_parents_create")
    @role_required(Role.ADMIN)
    def admin_parents_create(ctx):
        data = request_data()
        try:
            parent_id = container.parent_service.create_parent(
                ctx,
                full_name=data.get("fullName", ""),
                phone=data.get("phone", ""),
                password=data.get("password", ""),
                student_ids=json_field(data, "studentIds", []),
            )
        except Exception as e:
            return error_response(e, action="create parent")
        return result_response(OperationResult.ok("Parent created successfully", id=parent_id), 201)

    @app.route("/admin/parents/<parent_id>/delete", methods=["POST"], endpoint="admin_parents_delete")
    @role_required(Role.ADMIN)
    def admin_parents_delete(ctx, parent_id: str):
        try:
            container.parent_service.delete_parent(ctx, parent_id=parent_id)
        except Exception as e:
            return error_response(e, action="delete parent")
        return result_response(OperationResult.ok("Parent deleted successfully"))
