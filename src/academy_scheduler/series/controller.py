from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import add_days, today_local
from ..common.http import json_body
from ..common.serialization import to_json
from ..common.validators import ValidationResult, require_calendar_date, require_int_range
from ..container import Container


def _generation_params(params, *, window_days: int):
    today = today_local()
    result = ValidationResult()
    start = result.check("start", require_calendar_date, params.get("start") or today)
    end = result.check("end", require_calendar_date, params.get("end") or add_days(today, window_days))
    series_id = None
    if params.get("series_id") not in (None, ""):
        series_id = result.check("series_id", require_int_range, params.get("series_id"), 1, 2**31 - 1)
    result.raise_if_invalid()
    return start, end, series_id


def register(app: Flask, container: Container) -> None:
    @app.route("/api/series", methods=["POST"], endpoint="series_create")
    def series_create():
        series = container.series_service.create(json_body())
        return jsonify({"success": True, "data": to_json(series)}), 201

    @app.route("/api/series/<int:series_id>", methods=["GET"], endpoint="series_detail")
    def series_detail(series_id: int):
        series = container.series_service.get(series_id)
        return jsonify({"success": True, "data": to_json(series)})

    @app.route("/api/series/<int:series_id>", methods=["PATCH"], endpoint="series_update")
    def series_update(series_id: int):
        series = container.series_service.update(series_id, json_body())
        return jsonify({"success": True, "data": to_json(series)})

    @app.route("/api/series/<int:series_id>", methods=["DELETE"], endpoint="series_retire")
    def series_retire(series_id: int):
        cancel_future = request.args.get("cancel_future", "").lower() == "true"
        result = container.series_service.retire(series_id, cancel_future=cancel_future)
        return jsonify({"success": result.ok, "data": to_json(result)})

    @app.route("/api/series/generate", methods=["GET", "POST"], endpoint="series_generate")
    def series_generate():
        params = request.args if request.method == "GET" else json_body()
        start, end, series_id = _generation_params(params, window_days=container.generation_window_days)

        result = container.instance_generator.generate(window_start=start, window_end=end, series_id=series_id)
        return jsonify({"success": result.ok, "data": to_json(result)})
