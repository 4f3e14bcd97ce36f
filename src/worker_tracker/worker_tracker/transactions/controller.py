from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import format_month_param, now_local, parse_month
from ..common.web import current_user, login_required
from ..core.exceptions import GatewayError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/workers/<int:worker_id>/transactions/new", methods=["GET", "POST"], endpoint="add_transaction")
    @login_required
    def add_transaction(worker_id: int):
        user = current_user()
        month_param = format_month_param(parse_month(request.values.get("month")))

        try:
            worker = container.worker_service.get_worker(user, worker_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard", month=month_param))

        form = {
            "amount": request.form.get("amount", ""),
            "hours": request.form.get("hours", ""),
            "date": request.form.get("date") or now_local().date().strftime("%Y-%m-%d"),
            "notes": request.form.get("notes", ""),
        }
        error = None

        if request.method == "POST":
            try:
                data = container.transaction_service.parse_form(
                    amount=form["amount"],
                    hours=form["hours"],
                    work_date=form["date"],
                    notes=form["notes"],
                )
                container.transaction_service.add(user, worker.worker_id, data)
                flash(f"Transaction added for {worker.name}.", "success")
                return redirect(url_for("dashboard", month=month_param))
            except ValidationError as e:
                error = str(e)
            except GatewayError as e:
                logger.exception("Error adding transaction for worker %s", worker_id)
                error = f"Failed to add transaction: {e}"

        return render_template(
            "transactions/add_transaction.html",
            worker=worker,
            form=form,
            error=error,
            month_param=month_param,
        )

    @app.route("/transactions/<int:transaction_id>/delete", methods=["POST"], endpoint="delete_transaction")
    @login_required
    def delete_transaction(transaction_id: int):
        worker_id = request.form.get("worker_id", type=int)
        month_param = format_month_param(parse_month(request.form.get("month")))
        try:
            container.transaction_service.delete(current_user(), transaction_id)
            flash("Transaction deleted.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except GatewayError:
            logger.exception("Error deleting transaction %s", transaction_id)
            flash("System error while deleting transaction", "danger")

        if worker_id:
            return redirect(url_for("worker_history", worker_id=worker_id, month=month_param))
        return redirect(url_for("dashboard", month=month_param))
