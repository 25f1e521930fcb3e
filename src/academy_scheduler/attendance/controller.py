from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..common.serialization import to_json
from ..common.validators import ValidationResult, require_int_range
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_record")
    def attendance_record():
        body = json_body()
        result = ValidationResult()
        instance_id = result.check("instance_id", require_int_range, body.get("instance_id"), 1, 2**31 - 1)
        student_id = result.check("student_id", require_int_range, body.get("student_id"), 1, 2**31 - 1)
        result.raise_if_invalid()

        record = container.attendance_service.record(
            instance_id=instance_id,
            student_id=student_id,
            status=body.get("status"),
        )
        return jsonify({"success": True, "data": to_json(record)})
