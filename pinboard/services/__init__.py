"""
Domain services.

Each module owns one area of the API (users, boards, pins, comments, feeds,
settings, analytics, uploads) and talks to MongoDB directly through the
Motor database handed in by the endpoint layer.
"""
