"""Overview dashboard page layout."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional, Sequence

import streamlit as st

from analytics.export import build_export_frame, export_file_name, write_export_workbook
from app.layout import card
from core.formatting import build_headline, format_currency, format_margin
from core.models import DashboardData, DataItem, EntityKind, ViewMode
from visualization import build_revenue_profit_chart, build_status_chart


@dataclass(frozen=True)
class RowAction:
    action: str
    item: DataItem


def _render_stat_cards(data: DashboardData, symbol: str) -> None:
    stats = data["stats"]
    cols = st.columns(5)
    cols[0].metric("Net profit", format_currency(stats["total_profit"], symbol))
    cols[1].metric("Revenue", format_currency(stats["total_revenue"], symbol))
    cols[2].metric("Recruited pax", f"{stats['total_pax']:,}")
    cols[3].metric("Confirmed groups", f"{stats['active_groups']:,}")
    cols[4].metric("Average margin", format_margin(data["margin"]))
    st.caption(f"{build_headline(stats, symbol)} · {stats['project_count']} business projects")


def _chart_title(view_mode: ViewMode) -> str:
    if view_mode is ViewMode.TRAVEL_ONLY:
        return "Revenue and profit by destination"
    if view_mode is ViewMode.BUSINESS_ONLY:
        return "Revenue and profit by project"
    return "Revenue and profit by destination / project"


def _render_charts(data: DashboardData, symbol: str) -> None:
    chart_col, status_col = st.columns((2, 1), gap="medium")
    with chart_col:
        with card(_chart_title(data["view_mode"]), suffix=f"Top {len(data['chart_series'])}"):
            st.plotly_chart(
                build_revenue_profit_chart(data["chart_series"], symbol),
                use_container_width=True,
                key="revenue-profit-bars",
            )
    with status_col:
        with card("Group status"):
            if data["view_mode"] is ViewMode.BUSINESS_ONLY:
                st.info("Status applies to travel groups only.")
            else:
                st.plotly_chart(
                    build_status_chart(data["status_histogram"]),
                    use_container_width=True,
                    key="status-donut",
                )


def _render_export(items: Sequence[DataItem], sheet_name: str, file_prefix: str) -> None:
    if not items:
        st.caption("Nothing to export yet.")
        return
    buffer = io.BytesIO()
    write_export_workbook(items, buffer, sheet_name=sheet_name)
    st.download_button(
        "Export Excel",
        data=buffer.getvalue(),
        file_name=export_file_name(file_prefix),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def _render_table(items: Sequence[DataItem], loading: bool, symbol: str) -> Optional[RowAction]:
    if not items:
        if loading:
            st.info("Connecting to the record store…")
        else:
            st.success("System ready. Use the sidebar to add your first record.")
        return None

    frame = build_export_frame(items)
    for column in ("Revenue", "Expense", "Profit"):
        frame[column] = frame[column].map(lambda value: format_currency(value, symbol))
    st.dataframe(
        frame.drop(columns=["Created At"]),
        use_container_width=True,
        hide_index=True,
    )

    labels = [_row_label(item) for item in items]
    pick_col, edit_col, delete_col = st.columns((4, 1, 1))
    selected = pick_col.selectbox("Record", range(len(items)), format_func=lambda idx: labels[idx])
    if edit_col.button("Edit", use_container_width=True):
        return RowAction("edit", items[selected])
    confirm = delete_col.checkbox("Confirm delete", key="confirm-delete")
    if delete_col.button("Delete", use_container_width=True, disabled=not confirm):
        return RowAction("delete", items[selected])
    return None


def _row_label(item: DataItem) -> str:
    if item.kind is EntityKind.TRAVEL:
        name = item.group_no or "(no group no.)"
        return f"{item.date} · {name} · {item.destination or '-'}"
    return f"{item.date} · {item.project_name or '(unnamed project)'}"


def render_page(
    data: DashboardData,
    *,
    currency_symbol: str = "¥",
    sheet_name: str = "Records",
    file_prefix: str = "TourLedger_Records",
) -> Optional[RowAction]:
    """Render the dashboard overview and return a requested row action."""

    _render_stat_cards(data, currency_symbol)
    _render_charts(data, currency_symbol)

    with card("Recent records", suffix=f"{len(data['items'])} records"):
        _render_export(data["items"], sheet_name, file_prefix)
        return _render_table(data["items"], data["loading"], currency_symbol)


__all__ = ["RowAction", "render_page"]
