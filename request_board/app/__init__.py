"""
Application package initializer.

This package contains the request board service: configuration and
storage live in ``core``, pydantic payloads in ``schemas``, business
logic in ``services`` and the HTTP surface in ``api/v1``.  The ASGI
application is built in ``main``, which this package does not import;
the client imports ``schemas`` without creating an app.
"""
