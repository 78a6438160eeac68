"""
Homework board service.

Per-subject homework notes with file attachments, persisted as one JSON
document per subject and served over a small FastAPI application together
with a static front-end.
"""

__version__ = "1.0.0"
