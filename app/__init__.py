"""Streamlit front-end for the TourLedger dashboard."""

from app.main import main

__all__ = ["main"]
