"""
Top‑level package for the Carpost API.

Makes ``carpost_api`` importable so that modules under ``app`` can be
referenced with fully qualified names such as
``carpost_api.app.main``.  All functionality lives in ``app``.
"""

__all__ = []
