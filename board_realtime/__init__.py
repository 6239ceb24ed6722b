"""Realtime notification and board update service.

The package is laid out in layers: ``domain`` holds entities, errors and the
realtime event schema, ``application`` the notification use cases,
``infrastructure`` persistence, tokens and the live connection registry, and
``interfaces`` the FastAPI surface. ``client`` is the Python counterpart used
by consumers of the API.
"""
