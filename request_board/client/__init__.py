"""
Polling client for the request board.

``api`` wraps the HTTP interface, ``session`` holds one viewer's local
state, ``reconcile`` keeps that state in step with the server,
``interaction`` turns drag gestures into reorders and ``actions``
performs the other user mutations.  ``render`` and ``watch`` provide a
plain text front end.
"""

from .actions import RequestActions
from .api import RequestBoardAPI
from .interaction import Element, GestureEvent, InputSource, InteractionController
from .reconcile import ReconciliationLoop
from .session import ListSession

__all__ = [
    "Element",
    "GestureEvent",
    "InputSource",
    "InteractionController",
    "ListSession",
    "ReconciliationLoop",
    "RequestActions",
    "RequestBoardAPI",
]
