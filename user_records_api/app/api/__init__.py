"""
API package containing the HTTP routes.

``router`` aggregates the resource routers defined in ``endpoints``.
"""
