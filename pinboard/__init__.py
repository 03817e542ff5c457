"""Pinboard API: pins, boards, follows and feeds on FastAPI + MongoDB."""

__version__ = "1.0.0"
