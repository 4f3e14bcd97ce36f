from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import format_month_label, format_month_param, parse_month
from ..common.web import current_user, login_required
from ..core.exceptions import GatewayError, MonthCloseError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/month/close", methods=["GET", "POST"], endpoint="close_month")
    @login_required
    def close_month():
        user = current_user()
        month = parse_month(request.values.get("month"))
        month_param = format_month_param(month)
        service = container.month_close_service

        if request.method == "POST":
            try:
                result = service.close(user, month, confirmed=request.form.get("confirm") == "yes")
                flash(
                    f"Month closed successfully! {result.summaries_written} summaries archived, "
                    f"{result.transactions_deleted} transactions cleared.",
                    "success",
                )
                return redirect(url_for("dashboard", month=month_param))
            except ValidationError as e:
                flash(str(e), "warning")
                return redirect(url_for("dashboard", month=month_param))
            except MonthCloseError:
                # Already logged by the service with the failing phase.
                flash("Error closing month", "danger")
                return redirect(url_for("dashboard", month=month_param))
            except GatewayError:
                logger.exception("Error loading month %s before close", month_param)
                flash("Error closing month", "danger")
                return redirect(url_for("dashboard", month=month_param))

        try:
            plan = service.prepare(user, month)
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("dashboard", month=month_param))
        except GatewayError:
            logger.exception("Error preparing month close for user %s", user.user_id)
            flash("Error closing month", "danger")
            return redirect(url_for("dashboard", month=month_param))

        return render_template(
            "month_close/confirm.html",
            plan=plan,
            month_param=month_param,
            month_label=format_month_label(month),
        )
