from __future__ import annotations

import asyncio

from flask import Flask, jsonify, request

from ..common.guards import current_role, current_user_id, role_required
from ..container import Container
from ..core.enums import Role, TrendPeriod
from ..core.exceptions import AuthorizationError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _check_can_view(student_id: str) -> None:
        if current_role() == Role.STUDENT and student_id != current_user_id():
            raise AuthorizationError("Students can only view their own attendance")

    @app.route("/api/students/<student_id>/stats", methods=["GET"], endpoint="api_student_stats")
    @role_required()
    def api_student_stats(student_id: str):
        _check_can_view(student_id)
        stats = container.stats_service.student_stats(student_id)
        return jsonify(stats.to_dict()), 200

    @app.route("/api/students/<student_id>/history", methods=["GET"], endpoint="api_student_history")
    @role_required()
    def api_student_history(student_id: str):
        _check_can_view(student_id)
        stats = container.stats_service.student_stats(student_id)
        history = container.stats_service.student_history(student_id)
        return jsonify(
            {
                "subjectStats": [s.to_dict() for s in stats.subject_breakdown],
                "records": [h.to_dict() for h in history],
            }
        ), 200

    @app.route("/api/students/<student_id>/trends", methods=["GET"], endpoint="api_student_trends")
    @role_required()
    def api_student_trends(student_id: str):
        _check_can_view(student_id)
        try:
            period = TrendPeriod(request.args.get("period", TrendPeriod.WEEK.value))
            count = int(request.args["count"]) if request.args.get("count") else None
        except ValueError as e:
            raise ValidationError("Invalid period or count") from e

        report = container.stats_service.trend(student_id, period=period, count=count)
        return jsonify(report.to_dict()), 200

    @app.route("/api/stats/batch", methods=["POST"], endpoint="api_batch_stats")
    @role_required(Role.TEACHER, Role.ADMIN)
    def api_batch_stats():
        data = request.get_json(silent=True) or {}
        student_ids = data.get("student_ids")
        if not student_ids:
            department = (data.get("department") or "").strip()
            if not department:
                raise ValidationError("student_ids or department is required")
            student_ids = container.students_repo.list_ids_for_cohort(
                department=department,
                semester=data.get("semester") or None,
            )

        results = asyncio.run(container.batch_stats_runner.run([str(s) for s in student_ids]))
        return jsonify({sid: stats.to_dict() for sid, stats in results.items()}), 200
