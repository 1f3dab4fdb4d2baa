from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import head_required, json_api
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Trainee


def _parse_trainees(items) -> list[Trainee]:
    if not isinstance(items, list):
        raise ValidationError("trainees must be a list")
    trainees = []
    for item in items:
        if not isinstance(item, dict) or not item.get("id"):
            raise ValidationError("each trainee needs an id")
        required = item.get("required_hours")
        if required is not None:
            try:
                required = float(required)
            except (TypeError, ValueError):
                raise ValidationError("required_hours must be a number") from None
        trainees.append(
            Trainee(
                user_id=str(item["id"]),
                name=item.get("name"),
                required_hours=required,
            )
        )
    return trainees


def register(app: Flask, container: Container) -> None:
    svc = container.team_service

    @app.route("/api/team/roster", methods=["POST"], endpoint="team_roster")
    @json_api
    @head_required
    def team_roster():
        data = request.get_json(silent=True) or {}
        trainees = _parse_trainees(data.get("trainees", []))
        work_date = parse_iso_date(data["date"]) if data.get("date") else now_local().date()

        roster = svc.roster(trainees, work_date=work_date)
        progress = {t.user_id: svc.trainee_progress(t).percent for t in trainees}
        return jsonify(
            {
                "success": True,
                "date": work_date.strftime("%Y-%m-%d"),
                "summary": asdict(roster.summary),
                "rows": [
                    {**asdict(r), "status": r.status.value, "progress_percent": progress[r.user_id]}
                    for r in roster.rows
                ],
            }
        )
