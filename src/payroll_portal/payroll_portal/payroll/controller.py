from __future__ import annotations

import io
import traceback
from typing import Optional

from flask import Flask, g, redirect, render_template, request, send_file, session, url_for

from ..auth.controller import admin_required, login_required
from ..common.datetime_utils import now_local
from ..core.constants import PERIOD_YEAR_CHOICES
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from ..status.board import StatusBoard
from .admin_view import AdminAggregationView
from .model import EmployeeRecord, Period
from .pay import format_amount
from .team_form import TeamEntryForm


def _period_from(year: Optional[str], month: Optional[str]) -> Period:
    current = Period.from_datetime(now_local())
    try:
        return Period(int(year or current.year), int(month or current.month))
    except (TypeError, ValueError, ValidationError):
        return current


def _period_choices() -> dict:
    this_year = now_local().year
    return {
        "years": [this_year - i for i in range(PERIOD_YEAR_CHOICES)],
        "months": list(range(1, 13)),
    }


def _posted_rows() -> list[EmployeeRecord]:
    columns = {name: request.form.getlist(name) for name in ("id",) + EmployeeRecord.editable_fields()}
    count = max((len(values) for values in columns.values()), default=0)
    rows = []
    for i in range(count):
        rows.append(
            EmployeeRecord(**{name: (values[i] if i < len(values) else "") for name, values in columns.items()})
        )
    return rows


def register(app: Flask, container: Container) -> None:
    app.jinja_env.filters["amount"] = format_amount

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        current = g.session_manager.current
        period = _period_from(request.args.get("year"), request.args.get("month"))
        status = StatusBoard(session)

        if current.profile.is_admin:
            view = AdminAggregationView(container.record_store, status, container.exporter, period=period)
            view.mount()
            try:
                return render_template(
                    "admin.html", view=view, sections=view.sections(), period=period, **_period_choices()
                )
            finally:
                view.unmount()

        form = TeamEntryForm(container.record_store, status, team_id=current.profile.team_id, period=period)
        form.mount()
        try:
            return render_template("team.html", form=form, period=period, **_period_choices())
        finally:
            form.unmount()

    @app.route("/team/<int:year>/<int:month>", methods=["POST"], endpoint="team_action")
    @login_required
    def team_action(year: int, month: int):
        current = g.session_manager.current
        if current.profile.is_admin:
            raise AuthorizationError("Team entry is only available to team accounts")

        status = StatusBoard(session)
        try:
            period = Period(year, month)
        except ValidationError as e:
            status.error(str(e))
            return redirect(url_for("dashboard"))

        form = TeamEntryForm(container.record_store, status, team_id=current.profile.team_id, period=period)
        form.mount()
        try:
            form.load_draft(_posted_rows())
            action = request.form.get("action", "")

            if action == "save":
                if form.save():
                    return redirect(url_for("dashboard", year=period.year, month=period.month))
            elif action == "add":
                form.add_row()
            elif action == "copy":
                form.copy_prior_period()
            elif action.startswith("remove:"):
                form.remove_row(action.split(":", 1)[1])
            else:
                status.error("Unknown action")
        except ValidationError as e:
            status.error(str(e))
        except Exception as e:
            traceback.print_exc()
            if bool(app.config.get("DEBUG", False)):
                status.error(f"System error: {e}")
            else:
                status.error("System error")
        finally:
            form.unmount()

        return render_template(
            "team.html",
            form=form,
            period=period,
            return_to=url_for("dashboard", year=period.year, month=period.month),
            **_period_choices(),
        )

    @app.route("/admin/export", endpoint="admin_export")
    @admin_required
    def admin_export():
        period = _period_from(request.args.get("year"), request.args.get("month"))
        view = AdminAggregationView(container.record_store, StatusBoard(session), container.exporter, period=period)
        view.mount()
        try:
            exported = view.export()
        finally:
            view.unmount()

        if exported is None:
            return redirect(url_for("dashboard", year=period.year, month=period.month))
        return send_file(
            io.BytesIO(exported.content),
            download_name=exported.filename,
            as_attachment=True,
            mimetype=exported.mimetype,
        )
