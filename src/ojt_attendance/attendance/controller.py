from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_context, json_api
from ..common.validators import require_coordinate
from ..container import Container
from ..core.constants import LIVE_REFRESH_SECONDS, STATUS_REFRESH_SECONDS
from ..core.enums import DayStatus
from .geofence import Coordinate
from .model import DayRecord


def _record_json(r: DayRecord) -> dict:
    return {
        "date": r.date_key,
        "time_in": r.time_in,
        "time_out": r.time_out,
        "total_hours": r.total_hours,
        "work_notes": r.work_notes,
    }


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @json_api
    def attendance_today():
        view = container.progress_service.today_status(current_context())
        return jsonify(
            {
                "success": True,
                "status": view.status.value,
                "time_in": view.time_in,
                "time_out": view.time_out,
                "elapsed_minutes": view.elapsed_minutes,
                "total_hours": view.total_hours,
                "refresh_seconds": LIVE_REFRESH_SECONDS if view.status == DayStatus.IN_PROGRESS else STATUS_REFRESH_SECONDS,
            }
        )

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @json_api
    def attendance_clock_in():
        ctx = current_context()
        ctx.require_user_id()

        data = request.get_json(silent=True) or {}
        position = None
        if data.get("lat") is not None and data.get("lng") is not None:
            position = Coordinate(*require_coordinate(data["lat"], data["lng"]))

        record = svc.clock_in(ctx, locator=container.locator_for(position))
        return jsonify({"success": True, "message": "Time-in recorded successfully", "data": _record_json(record)})

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_request_clock_out")
    @json_api
    def attendance_request_clock_out():
        pending = svc.request_clock_out(current_context())
        return jsonify(
            {
                "success": True,
                "token": pending.token,
                "message": "Are you sure you want to time out now? Your current session will be saved.",
            }
        )

    @app.route("/api/attendance/clock-out/<token>/confirm", methods=["POST"], endpoint="attendance_confirm_clock_out")
    @json_api
    def attendance_confirm_clock_out(token: str):
        record = svc.confirm_clock_out(current_context(), token)
        return jsonify(
            {
                "success": True,
                "message": "Time-out recorded successfully",
                "totalHours": record.total_hours,
                "data": _record_json(record),
            }
        )

    @app.route("/api/attendance/clock-out/<token>", methods=["DELETE"], endpoint="attendance_cancel_clock_out")
    @json_api
    def attendance_cancel_clock_out(token: str):
        cancelled = svc.cancel_clock_out(current_context(), token)
        return jsonify({"success": True, "cancelled": cancelled})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @json_api
    def attendance_history():
        limit = request.args.get("limit", type=int)
        kwargs = {"limit": max(1, min(limit, 120))} if limit else {}
        return jsonify({"success": True, "records": svc.get_history(current_context(), **kwargs)})
