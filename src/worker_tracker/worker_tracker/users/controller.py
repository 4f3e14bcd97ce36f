from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import current_user
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import AuthenticationError, AuthorizationError, GatewayError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.before_request
    def drop_stale_session():
        if "user_id" not in session or request.endpoint in ("login", "logout", "static"):
            return None
        try:
            container.auth_service.check_session(current_user())
        except AuthorizationError as e:
            session.clear()
            flash(str(e), "warning")
            return redirect(url_for("login"))
        except GatewayError:
            # the view reports its own backend failure
            logger.exception("Could not verify session for user %s", session.get("user_id"))
        return None

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.authenticate(username, password)

                session.clear()
                session.permanent = bool(remember)
                app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
                session.update(s_user.to_session())

                flash("Signed in.", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Login failed for %s", username)
                if bool(app.config.get("DEBUG", False)):
                    flash(f"System error while signing in: {e}", "danger")
                else:
                    flash("System error while signing in", "danger")

        return render_template("login.html")

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        session.clear()
        flash("Signed out.", "info")
        return redirect(url_for("login"))
