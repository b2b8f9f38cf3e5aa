"""TourLedger dashboard with live-mirrored travel groups and business projects."""

from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from analytics.view import available_months
from app.layout import (
    FormAction,
    inject_css,
    render_entry_form,
    render_navbar,
    render_view_filters,
)
from app.pages import RowAction, render_overview_page
from app.runtime import BackgroundLoop
from config import Settings, configure_logging, get_settings
from core import (
    AnonymousAuth,
    AuthFailure,
    FormState,
    InMemoryStore,
    ValidationError,
    WriteError,
)
from core.session import DashboardSession
from data.synth import seed_store

logger = logging.getLogger(__name__)


@st.cache_resource(show_spinner=False)
def _get_runtime() -> tuple[BackgroundLoop, DashboardSession]:
    """Create the background loop and a demo-backed session once per server."""

    settings = get_settings()
    configure_logging(settings.log_level)

    store = InMemoryStore()
    seed_store(store, settings.collections, seed=settings.demo_seed, months=settings.demo_months)
    session = DashboardSession(
        store,
        AnonymousAuth(),
        collections=settings.collections,
        chart_limit=settings.chart_limit,
    )
    runtime = BackgroundLoop()
    return runtime, session


def _draft() -> FormState:
    if "draft" not in st.session_state:
        st.session_state["draft"] = FormState.empty()
        st.session_state["is_editing"] = False
    return st.session_state["draft"]


def _replace_draft(form: FormState, *, editing: bool = False) -> None:
    st.session_state["draft"] = form
    st.session_state["is_editing"] = editing
    st.session_state["form_token"] = st.session_state.get("form_token", 0) + 1


def _handle_form_action(runtime: BackgroundLoop, session: DashboardSession, action: FormAction) -> None:
    if action.action in {"switch", "cancel"}:
        _replace_draft(action.form)
        st.rerun()

    try:
        result = runtime.run(session.submit(action.form, st.session_state.get("is_editing", False)))
    except ValidationError as exc:
        st.sidebar.warning(f"Please fill in: {', '.join(exc.missing_fields)}")
        st.session_state["draft"] = action.form
        return
    except WriteError as exc:
        st.sidebar.error(f"Save failed: {exc.cause}")
        st.session_state["draft"] = action.form
        return
    _replace_draft(result.next_form)
    st.rerun()


def _handle_row_action(runtime: BackgroundLoop, session: DashboardSession, action: RowAction) -> None:
    if action.action == "edit":
        _replace_draft(FormState.from_item(action.item), editing=True)
        st.rerun()

    try:
        runtime.run(session.remove(action.item))
    except WriteError as exc:
        st.error(f"Delete failed: {exc.cause}")
        return
    draft = _draft()
    if st.session_state.get("is_editing") and draft.identity == action.item.identity and draft.kind is action.item.kind:
        _replace_draft(FormState.empty(draft.kind))
    st.rerun()


def _ensure_started(runtime: BackgroundLoop, session: DashboardSession) -> Optional[str]:
    if session.started:
        return session.user_id
    try:
        return runtime.run(session.start())
    except AuthFailure as exc:
        st.error("Database connection issue")
        st.code(str(exc))
        if st.button("Retry connection"):
            st.rerun()
        return None


def _render(settings: Settings, runtime: BackgroundLoop, session: DashboardSession) -> None:
    user_id = _ensure_started(runtime, session)
    if user_id is None:
        return

    render_navbar(session.tracker.status, user_id)

    form_action = render_entry_form(
        _draft(),
        st.session_state.get("is_editing", False),
        session.tracker.status,
        connected=session.started,
        currency_symbol=settings.currency_symbol,
    )
    if form_action is not None:
        _handle_form_action(runtime, session, form_action)

    for error in session.errors:
        st.error(str(error))

    months = available_months(session.travel.records, session.business.records)
    view_mode, month_filter = render_view_filters(months)
    data = session.dashboard(view_mode, month_filter)

    row_action = render_overview_page(
        data,
        currency_symbol=settings.currency_symbol,
        sheet_name=settings.export_sheet_name,
        file_prefix=settings.export_file_prefix,
    )
    if row_action is not None:
        _handle_row_action(runtime, session, row_action)


def main() -> None:
    """Application entrypoint for the TourLedger dashboard."""

    st.set_page_config(
        page_title="TourLedger | Dashboard",
        page_icon="🧭",
        layout="wide",
    )
    inject_css()
    settings = get_settings()
    runtime, session = _get_runtime()
    _render(settings, runtime, session)


if __name__ == "__main__":
    main()
