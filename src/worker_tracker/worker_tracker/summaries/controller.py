from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, url_for

from ..common.datetime_utils import format_month_label
from ..common.web import csv_response, current_user, login_required
from ..core.exceptions import GatewayError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/archive", endpoint="archive")
    @login_required
    def archive():
        try:
            months = container.archive_service.list_months(current_user())
        except GatewayError:
            logger.exception("Error loading archive")
            flash("Error loading archive", "danger")
            months = []

        return render_template(
            "archive.html",
            months=months,
            month_label=format_month_label,
            active_page="archive",
        )

    @app.route("/archive/export", endpoint="archive_export")
    @login_required
    def archive_export():
        try:
            summaries = container.archive_service.list_summaries(current_user())
        except GatewayError:
            logger.exception("Error exporting archive")
            flash("Error exporting archive", "danger")
            return redirect(url_for("archive"))

        rows = [
            {
                "month": s.month.strftime("%Y-%m"),
                "worker": s.worker_name,
                "transactions": s.transaction_count,
                "total_amount": f"{s.total_amount:.2f}",
                "total_hours": f"{s.total_hours:.2f}",
                "closed_at": s.created_at.strftime("%Y-%m-%d %H:%M") if s.created_at else "",
            }
            for s in summaries
        ]
        return csv_response(
            rows=rows,
            fieldnames=["month", "worker", "transactions", "total_amount", "total_hours", "closed_at"],
            filename="monthly_summaries.csv",
        )
