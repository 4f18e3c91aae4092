"""
Service layer.

Each service encapsulates the business logic of one area and talks to
SQLite through a cursor factory passed to its constructor (by default
``core.db.get_cursor``).  API handlers obtain services through the
dependency providers in ``api.deps``.
"""
