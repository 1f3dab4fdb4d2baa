from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_context, json_api
from ..container import Container
from .service import format_note_text


def register(app: Flask, container: Container) -> None:
    svc = container.note_service

    def _payload(record):
        return {
            "success": True,
            "date": record.date_key,
            "note": record.work_notes or "",
            "formatted": format_note_text(record.work_notes),
            "saved_at": record.updated_at.isoformat() if record.updated_at else None,
        }

    @app.route("/api/notes/today", methods=["POST"], endpoint="notes_save_today")
    @json_api
    def notes_save_today():
        data = request.get_json(silent=True) or {}
        record = svc.save_today_note(current_context(), str(data.get("text") or ""))
        return jsonify(_payload(record))

    @app.route("/api/notes/<date_key>", methods=["PUT"], endpoint="notes_edit")
    @json_api
    def notes_edit(date_key: str):
        data = request.get_json(silent=True) or {}
        record = svc.edit_note(current_context(), date_key, str(data.get("text") or ""))
        return jsonify(_payload(record))
