"""Rule API routes."""

from fastapi import APIRouter
from pydantic import ValidationError

from automator.api.deps import EngineDep, event_from_request
from automator.models.rule import Rule
from automator.schemas.common import APIResponse
from automator.schemas.event import (
    EventRequest,
    MatchResponse,
    ValidateRequest,
    ValidateResponse,
)

router = APIRouter(prefix="/rules", tags=["rules"])


@router.post("/validate", response_model=APIResponse[ValidateResponse])
async def validate_rule(data: ValidateRequest) -> APIResponse[ValidateResponse]:
    """Validate a rule's shape.

    Trigger and action configurations must match the fields of their kind.
    """
    errors: list[str] = []
    try:
        Rule.model_validate(data.rule)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]

    return APIResponse(data=ValidateResponse(valid=not errors, errors=errors))


@router.post("/match", response_model=APIResponse[MatchResponse])
async def match_rules(data: EventRequest, engine: EngineDep) -> APIResponse[MatchResponse]:
    """Dry-run: which rules would fire for an event. Nothing is dispatched."""
    event = event_from_request(data)
    matched = engine.match(event, data.rules)
    return APIResponse(
        data=MatchResponse(
            event_id=event.event_id,
            matched=[rule.name for rule in matched],
        )
    )
