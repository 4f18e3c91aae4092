"""
HTTP API.

``router`` in ``api.router`` aggregates the area routers from
``api.endpoints``; ``main.create_app`` mounts it under ``/api``.
"""
