from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.guards import require_class_access, role_required
from ..container import Container
from ..core.enums import Role
from .payload import build_scan_uri
from .qr import render_qr_base64

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/token", methods=["POST"], endpoint="api_regenerate_token")
    @role_required(Role.TEACHER, Role.ADMIN)
    def api_regenerate_token(class_id: str):
        require_class_access(container.classes_repo, class_id)

        now = now_local()
        token = container.token_manager.generate(class_id, now=now)
        scan_uri = build_scan_uri(container.public_base_url, class_id, token.value)

        return jsonify(
            {
                "success": True,
                "classId": class_id,
                "token": token.value,
                "issuedAt": token.issued_at.isoformat(),
                "expiresAt": token.expires_at.isoformat(),
                "expiresIn": int((token.expires_at - now).total_seconds()),
                "scanUri": scan_uri,
                "qr": render_qr_base64(scan_uri),
            }
        ), 200

    @app.route("/api/classes/<class_id>/token", methods=["GET"], endpoint="api_token_status")
    @role_required(Role.TEACHER, Role.ADMIN)
    def api_token_status(class_id: str):
        school_class = require_class_access(container.classes_repo, class_id)

        now = now_local()
        remaining = container.token_manager.time_remaining(school_class, now)
        token = school_class.current_token
        return jsonify(
            {
                "success": True,
                "classId": class_id,
                "active": remaining.total_seconds() > 0,
                "secondsRemaining": int(remaining.total_seconds()),
                "expiresAt": token.expires_at.isoformat() if token else None,
            }
        ), 200
