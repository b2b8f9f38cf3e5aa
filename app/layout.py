"""Shared layout primitives for the TourLedger Streamlit app."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import pandas as pd
import streamlit as st

from core.formatting import format_currency
from core.models import ALL_MONTHS, EntityKind, FormState, GroupStatus, SyncStatus, ViewMode, coerce_amount


@dataclass(frozen=True)
class FormAction:
    action: str
    form: FormState


VIEW_MODE_LABELS: dict[ViewMode, str] = {
    ViewMode.TOTAL: "Total",
    ViewMode.TRAVEL_ONLY: "Travel groups",
    ViewMode.BUSINESS_ONLY: "Business projects",
}

KIND_LABELS: dict[EntityKind, str] = {
    EntityKind.TRAVEL: "Travel group",
    EntityKind.BUSINESS: "Business project",
}

_SYNC_CHIPS: dict[SyncStatus, tuple[str, str]] = {
    SyncStatus.IDLE: ("Synced", "tl-chip"),
    SyncStatus.SYNCING: ("Syncing…", "tl-chip tl-chip--busy"),
    SyncStatus.ERROR: ("Sync error", "tl-chip tl-chip--error"),
}


def inject_css() -> None:
    """Inject global card styling for the TourLedger dashboard."""

    st.markdown(
        """
        <style>
          :root {
            --gap: 16px;
            --radius: 12px;
            --card-bg: #FFFFFF;
            --border: #E2E8F0;
            --shadow: 0 1px 2px rgba(16, 24, 40, 0.05), 0 1px 3px rgba(16, 24, 40, 0.06);
          }

          body, [data-testid="stAppViewContainer"] > .main {
            background: #F8FAFC;
          }

          .block-container {
            max-width: 1280px;
            padding-top: 2rem;
            padding-bottom: 4rem;
          }

          .tl-nav {
            display: flex;
            align-items: center;
            justify-content: space-between;
            padding: 0.9rem 0;
          }

          .tl-nav__brand {
            font-size: 1.5rem;
            font-weight: 700;
            color: #0F172A;
          }

          .tl-nav__meta {
            display: flex;
            align-items: center;
            gap: 0.8rem;
            color: #64748B;
            font-size: 0.85rem;
          }

          .tl-card-anchor {
            display: none;
          }

          [data-testid="stVerticalBlock"]:has(> .tl-card-anchor) {
            background: var(--card-bg);
            border: 1px solid var(--border);
            border-radius: var(--radius);
            box-shadow: var(--shadow);
            padding: 16px;
            margin-bottom: var(--gap);
            gap: 12px;
          }

          .tl-card__head {
            display: flex;
            align-items: center;
            justify-content: space-between;
            font-weight: 600;
            color: #1E293B;
          }

          .tl-chip {
            font-size: 12px;
            padding: 2px 10px;
            border-radius: 999px;
            border: 1px solid #BBF7D0;
            background: #F0FDF4;
            color: #047857;
            white-space: nowrap;
          }

          .tl-chip--busy {
            border-color: #BFDBFE;
            background: #EFF6FF;
            color: #1D4ED8;
          }

          .tl-chip--error {
            border-color: #FECDD3;
            background: #FFF1F2;
            color: #BE123C;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str, suffix: str | None = None):
    """Render content inside a reusable TourLedger card."""

    chip_html = f'<span class="tl-chip">{suffix}</span>' if suffix else ""
    container = st.container()
    with container:
        st.markdown('<div class="tl-card-anchor"></div>', unsafe_allow_html=True)
        st.markdown(
            f'<div class="tl-card__head"><span>{title}</span>{chip_html}</div>',
            unsafe_allow_html=True,
        )
        yield


def render_navbar(sync_status: SyncStatus, user_id: Optional[str]) -> None:
    label, css_class = _SYNC_CHIPS[sync_status]
    user_label = user_id or "connecting…"
    st.markdown(
        f"""
        <nav class="tl-nav">
            <div class="tl-nav__brand">TourLedger</div>
            <div class="tl-nav__meta"><span>{user_label}</span><span class="{css_class}">{label}</span></div>
        </nav>
        """,
        unsafe_allow_html=True,
    )


def _month_label(key: str) -> str:
    if key == ALL_MONTHS:
        return "All months"
    try:
        return pd.Period(key, freq="M").strftime("%B %Y")
    except (TypeError, ValueError):
        return key


def render_view_filters(months: Sequence[str]) -> tuple[ViewMode, str]:
    """Render the view-mode and month selectors and return the choices."""

    options = [ALL_MONTHS, *months]
    stored = st.session_state.get("month_filter", ALL_MONTHS)
    if stored not in options:
        st.session_state["month_filter"] = ALL_MONTHS

    mode_col, month_col = st.columns((2, 1))
    with mode_col:
        view_mode = st.radio(
            "View",
            list(VIEW_MODE_LABELS),
            format_func=lambda mode: VIEW_MODE_LABELS[mode],
            horizontal=True,
            key="view_mode",
        )
    with month_col:
        month_filter = st.selectbox("Month", options, format_func=_month_label, key="month_filter")
    return ViewMode(view_mode), str(month_filter)


def keep_exact_amount(current: Decimal, widget_value: float) -> Decimal:
    """Return ``current`` unless the float widget value differs from it."""

    if widget_value == float(current):
        return current
    return coerce_amount(widget_value)


def _status_options(current: GroupStatus | str) -> list[GroupStatus | str]:
    options: list[GroupStatus | str] = list(GroupStatus)
    if current not in options:
        options.append(current)
    return options


def render_entry_form(
    draft: FormState,
    is_editing: bool,
    sync_status: SyncStatus,
    connected: bool,
    currency_symbol: str = "¥",
) -> Optional[FormAction]:
    """Render the sidebar entry form; returns the user's action, if any."""

    token = st.session_state.setdefault("form_token", 0)
    with st.sidebar:
        st.markdown(f"### {'Edit record' if is_editing else 'New record'}")

        kind = st.radio(
            "Type",
            list(EntityKind),
            index=list(EntityKind).index(draft.kind),
            format_func=lambda value: KIND_LABELS[value],
            horizontal=True,
            disabled=is_editing,
            key=f"form-kind-{token}",
        )
        if EntityKind(kind) is not draft.kind:
            return FormAction("switch", draft.switch_kind(EntityKind(kind)))

        form = draft.copy()
        with st.form(f"entry-form-{token}"):
            if form.kind is EntityKind.TRAVEL:
                form.update("group_no", st.text_input("Group no.", value=form.group_no, placeholder="TG-2024001"))
            else:
                form.update("project_name", st.text_input("Project name", value=form.project_name))

            try:
                current_date = date.fromisoformat(form.date)
            except ValueError:
                current_date = date.today()
            form.update("date", st.date_input("Date", value=current_date).isoformat())

            if form.kind is EntityKind.TRAVEL:
                form.update("destination", st.text_input("Destination", value=form.destination))
            form.update("person_in_charge", st.text_input("Person in charge", value=form.person_in_charge))

            if form.kind is EntityKind.TRAVEL:
                options = _status_options(form.status)
                form.update(
                    "status",
                    st.selectbox(
                        "Status",
                        options,
                        index=options.index(form.status),
                        format_func=lambda value: value.value if isinstance(value, GroupStatus) else str(value),
                    ),
                )
                form.update(
                    "recruit_count",
                    st.number_input("Recruit count", min_value=0, step=1, value=int(form.recruit_count)),
                )

            revenue_col, expense_col = st.columns(2)
            revenue = revenue_col.number_input("Revenue", value=float(form.revenue), step=100.0)
            expense = expense_col.number_input("Expense", value=float(form.expense), step=100.0)
            form.update("revenue", keep_exact_amount(form.revenue, revenue))
            form.update("expense", keep_exact_amount(form.expense, expense))

            st.caption(f"Projected profit: {format_currency(form.projected_profit, currency_symbol)}")

            submitted = st.form_submit_button(
                "Update record" if is_editing else "Save record",
                disabled=sync_status is SyncStatus.SYNCING or not connected,
                type="primary",
            )

        if is_editing and st.button("Cancel editing", key=f"form-cancel-{token}"):
            return FormAction("cancel", FormState.empty(draft.kind))

    if submitted:
        return FormAction("save", form)
    return None


__all__ = [
    "FormAction",
    "KIND_LABELS",
    "VIEW_MODE_LABELS",
    "card",
    "inject_css",
    "keep_exact_amount",
    "render_entry_form",
    "render_navbar",
    "render_view_filters",
]
