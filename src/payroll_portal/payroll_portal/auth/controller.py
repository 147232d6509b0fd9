from __future__ import annotations

import logging
import traceback
from functools import wraps

from flask import Flask, g, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.exceptions import AuthorizationError
from ..status.board import StatusBoard

logger = logging.getLogger(__name__)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if g.session_manager.current is None:
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current = g.session_manager.current
        if current is None:
            return redirect(url_for("login"))
        if not current.profile.is_admin:
            raise AuthorizationError("Administrator access required")
        return view(*args, **kwargs)

    return wrapper


def register(app: Flask, container: Container) -> None:
    @app.errorhandler(AuthorizationError)
    def forbidden(e):
        logger.info("Forbidden %s: %s", request.path, e)
        StatusBoard(session).error(str(e))
        return render_template("base.html", return_to=url_for("dashboard")), 403

    @app.context_processor
    def inject_status():
        manager = g.get("session_manager")
        return {
            "status": StatusBoard(session).current,
            "current_user": manager.current if manager else None,
        }

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        manager = g.session_manager
        if manager.current is not None:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            try:
                if manager.login(email, password):
                    return redirect(url_for("dashboard"))
            except Exception as e:
                traceback.print_exc()
                if bool(app.config.get("DEBUG", False)):
                    StatusBoard(session).error(f"System error during login: {e}")
                else:
                    StatusBoard(session).error("System error during login")

        return render_template("login.html")

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        g.session_manager.logout()
        StatusBoard(session).info("You have been signed out.")
        return redirect(url_for("login"))

    @app.route("/status/dismiss", methods=["POST"], endpoint="dismiss_status")
    def dismiss_status():
        StatusBoard(session).clear()
        target = request.form.get("next") or ""
        if not target.startswith("/") or target.startswith("//"):
            target = url_for("login")
        return redirect(target)
