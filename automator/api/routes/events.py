"""Event API routes."""

from fastapi import APIRouter

from automator.api.deps import EngineDep, event_from_request
from automator.schemas.common import APIResponse
from automator.schemas.event import EventRequest, EventResponse

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=APIResponse[EventResponse], status_code=202)
async def process_event(data: EventRequest, engine: EngineDep) -> APIResponse[EventResponse]:
    """Process an event against the supplied rule set.

    Returns once immediate actions have run; delayed actions stay pending.
    """
    event = event_from_request(data)
    outcomes = await engine.dispatch_event(event, data.rules)

    return APIResponse(
        data=EventResponse(
            event_id=event.event_id,
            matched=[outcome.rule_name for outcome in outcomes],
            outcomes=outcomes,
        )
    )
