"""
Top‑level package for the Request Board.

The package is split in two halves that share the error taxonomy in
``errors``:

* ``request_board.app`` – the FastAPI service that owns the ordered
  request list (the authoritative store and its mutation API).
* ``request_board.client`` – the polling client: an HTTP wrapper, the
  per‑viewer session, the reconciliation loop and the drag/touch
  interaction controller.

Importing the package itself has no side effects; the ASGI app is
created in ``request_board.app.main``.
"""

__all__ = []
