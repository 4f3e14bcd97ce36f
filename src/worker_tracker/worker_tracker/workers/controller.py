from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import (
    format_month_label,
    format_month_param,
    is_current_month,
    parse_month,
    shift_month,
)
from ..common.web import csv_response, current_user, login_required
from ..core.enums import SortKey
from ..core.exceptions import GatewayError, ValidationError
from ..container import Container
from .service import parse_sort_key

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _month_from_request():
        return parse_month(request.values.get("month"))

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        user = current_user()
        month = _month_from_request()
        search = request.args.get("q", "")
        sort = parse_sort_key(request.args.get("sort"))
        current = is_current_month(month)

        try:
            data = container.worker_service.build_dashboard(user, month, search=search, sort=sort)
            inactive = container.worker_service.list_inactive(user)
        except GatewayError:
            logger.exception("Error loading workers for user %s", user.user_id)
            flash("Error loading workers", "danger")
            data = None
            inactive = []

        return render_template(
            "dashboard.html",
            data=data,
            inactive=inactive,
            month_param=format_month_param(month),
            month_label=format_month_label(month),
            prev_month=format_month_param(shift_month(month, -1)),
            next_month=format_month_param(shift_month(month, 1)),
            is_current_month=current,
            search=search,
            sort=sort.value,
            sort_options=[(k.value, f"Sort by {k.value.title()}") for k in SortKey],
            active_page="dashboard",
        )

    @app.route("/dashboard/export", endpoint="dashboard_export")
    @login_required
    def dashboard_export():
        user = current_user()
        month = _month_from_request()
        try:
            workers = container.worker_service.list_with_stats(user, month)
        except GatewayError:
            logger.exception("Error exporting month for user %s", user.user_id)
            flash("Error exporting month", "danger")
            return redirect(url_for("dashboard", month=format_month_param(month)))

        rows = [
            {
                "month": format_month_param(month),
                "worker": w.name,
                "transactions": w.transaction_count,
                "total_amount": f"{w.total_amount:.2f}",
                "total_hours": f"{w.total_hours:.2f}",
                "avg_per_day": f"{w.avg_per_day:.2f}",
            }
            for w in workers
        ]
        return csv_response(
            rows=rows,
            fieldnames=["month", "worker", "transactions", "total_amount", "total_hours", "avg_per_day"],
            filename=f"workers_{format_month_param(month)}.csv",
        )

    @app.route("/workers/new", methods=["GET", "POST"], endpoint="add_worker")
    @login_required
    def add_worker():
        month_param = format_month_param(_month_from_request())
        error = None
        name = ""

        if request.method == "POST":
            name = request.form.get("name", "")
            try:
                container.worker_service.add_worker(current_user(), name)
                flash("Worker added.", "success")
                return redirect(url_for("dashboard", month=month_param))
            except ValidationError as e:
                error = str(e)
            except GatewayError as e:
                logger.exception("Error adding worker")
                error = f"Failed to add worker: {e}"

        return render_template("workers/add_worker.html", name=name, error=error, month_param=month_param)

    @app.route("/workers/<int:worker_id>/delete", methods=["POST"], endpoint="delete_worker")
    @login_required
    def delete_worker(worker_id: int):
        try:
            worker = container.worker_service.delete_worker(current_user(), worker_id)
            flash(f"Deleted {worker.name} and all their transactions.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except GatewayError:
            logger.exception("Error deleting worker %s", worker_id)
            flash("System error while deleting worker", "danger")

        return redirect(url_for("dashboard", month=format_month_param(_month_from_request())))

    def _set_active(worker_id: int, *, is_active: bool):
        try:
            worker = container.worker_service.set_active(current_user(), worker_id, is_active=is_active)
            flash(f"{worker.name} is now {'active' if is_active else 'inactive'}.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except GatewayError:
            logger.exception("Error updating worker %s", worker_id)
            flash("System error while updating worker", "danger")

        return redirect(url_for("dashboard", month=format_month_param(_month_from_request())))

    @app.route("/workers/<int:worker_id>/deactivate", methods=["POST"], endpoint="deactivate_worker")
    @login_required
    def deactivate_worker(worker_id: int):
        return _set_active(worker_id, is_active=False)

    @app.route("/workers/<int:worker_id>/activate", methods=["POST"], endpoint="activate_worker")
    @login_required
    def activate_worker(worker_id: int):
        return _set_active(worker_id, is_active=True)

    @app.route("/workers/<int:worker_id>/history", endpoint="worker_history")
    @login_required
    def worker_history(worker_id: int):
        month_param = format_month_param(_month_from_request())
        try:
            history = container.worker_service.history(current_user(), worker_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard", month=month_param))
        except GatewayError:
            logger.exception("Error loading history for worker %s", worker_id)
            flash("Error loading payment history", "danger")
            return redirect(url_for("dashboard", month=month_param))

        return render_template("workers/history.html", history=history, month_param=month_param)
