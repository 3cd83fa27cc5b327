from __future__ import annotations

import hmac

from flask import Flask, current_app, jsonify, request

from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _authorized() -> bool:
        secret = current_app.config.get("CRON_SECRET")
        if not secret:
            return True
        header = request.headers.get("Authorization", "")
        return hmac.compare_digest(header, f"Bearer {secret}")

    @app.route("/api/cron", methods=["GET", "POST"], endpoint="api_cron_auto_sign_out")
    def cron_auto_sign_out():
        if not _authorized():
            return jsonify({"error": "Unauthorized. Invalid cron secret.", "code": "NOT_AUTHENTICATED"}), 401
        try:
            report = container.reconciler.run()
        except Exception:
            current_app.logger.exception("Auto sign-out run failed")
            return jsonify({"success": False, "error": "Internal server error during cron job execution"}), 500

        return jsonify(
            {
                "success": True,
                "message": "Auto sign-out completed",
                "results": report.to_dict(),
            }
        )
