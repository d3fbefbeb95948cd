"""API dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from pydantic import ValidationError

from automator.engine.engine import AutomationEngine
from automator.models.event import Event, build_event
from automator.schemas.event import EventRequest


def get_engine(request: Request) -> AutomationEngine:
    """Get the engine created by the application lifespan."""
    return request.app.state.engine


EngineDep = Annotated[AutomationEngine, Depends(get_engine)]


def event_from_request(data: EventRequest) -> Event:
    """Build the typed event for a request, 422 if the payload does not fit."""
    try:
        return build_event(data.trigger, data.data)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=[
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ],
        ) from e
