# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pathlib import Path

from flask import Blueprint, Response, abort, jsonify, send_from_directory

from authme.shared.middleware.csrf import CsrfGuard


class CsrfController:
    """Hands a readable token to a frontend served from another origin.

    Mounted outside production only.
    """

    def __init__(self, *, csrf_guard: CsrfGuard) -> None:
        self._csrf_guard = csrf_guard

    def restore(self) -> tuple[Response, int]:
        response = jsonify({})
        self._csrf_guard.set_token_cookie(response)
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("csrf", __name__, url_prefix="/api/csrf")
        bp.add_url_rule("/restore", view_func=self.restore, methods=["GET"])
        return bp


class FrontendController:
    """Serves the built single-page frontend in production.

    Every page load refreshes the readable CSRF token cookie.
    """

    def __init__(self, *, csrf_guard: CsrfGuard, build_dir: Path) -> None:
        self._csrf_guard = csrf_guard
        self._build_dir = build_dir.resolve()

    def index(self, path: str = "") -> Response:
        if path.startswith("api/") or path == "api":
            abort(404)
        target = self._build_dir / path
        if path and target.is_file():
            return send_from_directory(self._build_dir, path)

        response = send_from_directory(self._build_dir, "index.html")
        self._csrf_guard.set_token_cookie(response)
        return response

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("frontend", __name__)
        bp.add_url_rule("/", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/<path:path>", view_func=self.index, methods=["GET"])
        return bp
