"""Demo data generators for TourLedger."""
