"""Dose scheduling and calendar aggregation for medication tracking.

This package holds the scheduling rules and domain models, kept free of
HTTP, storage and UI concerns so every computation is a pure function.
"""
