from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..common.serialization import to_json
from ..common.validators import require_choice
from ..container import Container
from ..core.enums import CancelScope
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    def classes_create():
        instance = container.instance_service.create_one_off(json_body())
        return jsonify({"success": True, "data": to_json(instance)}), 201

    @app.route("/api/classes/<int:instance_id>", methods=["GET"], endpoint="classes_detail")
    def classes_detail(instance_id: int):
        instance = container.instance_service.get(instance_id)
        return jsonify({"success": True, "data": to_json(instance)})

    @app.route("/api/classes/<int:instance_id>", methods=["DELETE"], endpoint="classes_cancel")
    def classes_cancel(instance_id: int):
        try:
            scope = require_choice(json_body().get("scope") or CancelScope.SINGLE.value, "scope", CancelScope)
        except ValidationError as e:
            raise ValidationError(str(e), field="scope")

        result = container.instance_service.cancel(instance_id, scope=scope)
        return jsonify({"success": result.ok, "data": to_json(result)})
