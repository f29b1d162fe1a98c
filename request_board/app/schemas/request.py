"""
Pydantic models for requests on the board.

Python code uses snake_case attribute names while the JSON wire format
uses camelCase (``submittedBy``, ``sortPosition`` …).  Every model
populates from either spelling and FastAPI serialises responses by
alias, so browsers and the Python client see the same payloads.

Input models are intentionally permissive: required values such as
``text`` are optional at the schema level and checked by
``RequestService`` so that a missing field produces the service's own
``ValidationError`` (HTTP 400) with a field name attached.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RequestStatus(str, Enum):
    """Workflow states of a request."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


STATUS_VALUES = tuple(s.value for s in RequestStatus)

_camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestRead(BaseModel):
    """A request as returned by ``GET /requests``.

    Instances compare by value, which the client relies on to detect
    whether a freshly fetched list differs from the local copy.
    """

    model_config = _camel_config

    id: int
    text: str
    submitted_by: str
    submitted_at: str
    status: RequestStatus = RequestStatus.PENDING
    priority: bool = False
    sort_position: int = 0
    year: Optional[int] = None
    type: Optional[str] = None


class RequestCreate(BaseModel):
    """Body of ``POST /requests``."""

    model_config = _camel_config

    text: Optional[str] = Field(None, examples=["The Thing (1982)"])
    submitted_by: Optional[str] = Field(None, examples=["Dana"])
    priority: bool = False
    year: Optional[int] = Field(None, examples=[1982])
    type: Optional[str] = Field(None, examples=["Movie"])


class RequestCreated(BaseModel):
    id: int
    message: str = "Request created successfully"


class StatusUpdate(BaseModel):
    """Body of ``PUT /requests/{id}/status``."""

    status: Optional[str] = None


class PositionUpdate(BaseModel):
    """Body of ``PUT /requests/{id}/position``.

    ``sortOrder`` is accepted as an alternative key.
    """

    position: int = Field(..., validation_alias=AliasChoices("position", "sortOrder"))


class ReorderRequest(BaseModel):
    """Body of ``PUT /requests/reorder``.

    ``ids`` is typed loosely so that a non‑list payload reaches the
    service and is rejected there with a descriptive message.
    ``requestIds`` is accepted as an alternative key.
    """

    ids: Any = Field(..., validation_alias=AliasChoices("ids", "requestIds"))


class MessageResponse(BaseModel):
    message: str
