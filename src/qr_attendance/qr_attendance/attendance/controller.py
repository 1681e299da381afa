from __future__ import annotations

import csv
import io
import logging
from datetime import date

from flask import Flask, jsonify, request
from PIL import Image, UnidentifiedImageError

from ..capture.session import ScanSession
from ..common.datetime_utils import parse_iso_date
from ..common.guards import current_user_id, require_class_access, role_required
from ..container import Container
from ..core.enums import Role, ScanState
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _code_from_request() -> str:
        """Code from a JSON/form body, or decoded from an uploaded QR photo."""

        upload = request.files.get("image")
        if upload is not None:
            # pyzbar needs the native zbar library; only load it for uploads.
            from ..capture.decoder import decode_frame

            try:
                with Image.open(upload.stream) as img:
                    return decode_frame(img.convert("RGB")) or ""
            except UnidentifiedImageError as e:
                raise ValidationError("Uploaded file is not an image") from e

        data = request.get_json(silent=True) or request.form
        return (data.get("code") or "").strip()

    def _write_roster_csv(rows, *, filename: str):
        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow(["Student Name", "USN", "Subject", "Timestamp", "Device Info"])
        for r in rows:
            writer.writerow(
                [r.full_name, r.usn or "", r.subject, r.timestamp.strftime("%Y-%m-%d %H:%M:%S"), r.device_fingerprint]
            )

        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/classes/<class_id>/attendance", methods=["POST"], endpoint="api_mark_attendance")
    @role_required(Role.STUDENT)
    def api_mark_attendance(class_id: str):
        code = _code_from_request()
        data = request.get_json(silent=True) or request.form
        device = (data.get("device") or request.headers.get("User-Agent") or "").strip()

        scan = ScanSession(
            container.attendance_service,
            student_id=current_user_id(),
            class_id=class_id,
            device_fingerprint=device,
        )
        state = scan.submit_manual_code(code)

        body = {
            "success": state == ScanState.SUCCESS,
            "state": state.value,
            "message": scan.message,
        }
        if scan.record is not None:
            body["timestamp"] = scan.record.timestamp.isoformat()

        return jsonify(body), 503 if state == ScanState.FAILURE else 200

    @app.route("/api/classes/<class_id>/scan-status", methods=["GET"], endpoint="api_scan_status")
    @role_required(Role.STUDENT)
    def api_scan_status(class_id: str):
        blocked = container.attendance_service.check_preconditions(student_id=current_user_id(), class_id=class_id)
        return jsonify(
            {
                "canScan": blocked is None,
                "state": blocked.value if blocked else ScanState.IDLE.value,
            }
        ), 200

    @app.route("/api/classes/<class_id>/attendance", methods=["GET"], endpoint="api_class_roster")
    @role_required(Role.TEACHER, Role.ADMIN)
    def api_class_roster(class_id: str):
        """Day roster as JSON, or as a CSV download with ``format=csv``."""

        school_class = require_class_access(container.classes_repo, class_id)

        date_s = request.args.get("date")
        try:
            attend_date = parse_iso_date(date_s) if date_s else date.today()
        except ValueError as e:
            raise ValidationError("date must be YYYY-MM-DD") from e

        rows = container.attendance_service.list_for_class_on_date(class_id, attend_date)
        if request.args.get("format") == "csv":
            filename = f"{school_class.subject}_{attend_date:%Y-%m-%d}_attendance.csv".replace(" ", "_")
            return _write_roster_csv(rows, filename=filename)

        return jsonify(
            {
                "classId": class_id,
                "date": attend_date.strftime("%Y-%m-%d"),
                "records": [
                    {
                        "studentId": r.student_id,
                        "studentName": r.full_name,
                        "usn": r.usn,
                        "subject": r.subject,
                        "timestamp": r.timestamp.isoformat(),
                        "deviceInfo": r.device_fingerprint,
                    }
                    for r in rows
                ],
            }
        ), 200
