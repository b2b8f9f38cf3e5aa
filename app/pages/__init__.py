"""Page modules for the TourLedger Streamlit application."""

from .overview import RowAction
from .overview import render_page as render_overview_page

__all__ = [
    "RowAction",
    "render_overview_page",
]
