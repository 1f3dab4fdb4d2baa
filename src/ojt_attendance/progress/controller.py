from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_context, json_api
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.progress_service

    @app.route("/api/progress/weekly", methods=["GET"], endpoint="progress_weekly")
    @json_api
    def progress_weekly():
        summary = svc.weekly_summary(current_context())
        return jsonify(
            {
                "success": True,
                "total_minutes": round(summary.total_minutes, 2),
                "days_attended": summary.days_attended,
                "avg_hours_per_day": round(summary.avg_hours_per_day, 1),
            }
        )

    @app.route("/api/progress", methods=["GET"], endpoint="progress_overall")
    @json_api
    def progress_overall():
        view = svc.cumulative_progress(current_context())
        return jsonify(
            {
                "success": True,
                "completed_minutes": view.completed_minutes,
                "remaining_minutes": view.remaining_minutes,
                "percent": view.percent,
                "target_hours": view.target_hours,
                "completed": view.completed_label,
                "remaining": view.remaining_label,
            }
        )
