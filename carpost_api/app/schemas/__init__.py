"""
Pydantic schemas for API payloads.

Request schemas are built only after the body passed the matching
``core.validation`` function; response schemas are built from
``sqlite3.Row`` objects by the services.
"""
