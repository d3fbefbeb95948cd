"""Delayed action API routes."""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, HTTPException

from automator.api.deps import EngineDep
from automator.schemas.common import APIResponse
from automator.schemas.event import ScheduledActionResponse

router = APIRouter(prefix="/scheduled", tags=["scheduled"])


@router.get("", response_model=APIResponse[list[ScheduledActionResponse]])
async def list_scheduled(engine: EngineDep) -> APIResponse[list[ScheduledActionResponse]]:
    """List delayed actions that have not fired yet."""
    now = engine.scheduler.clock.now()
    wall_now = datetime.now(timezone.utc)

    items = []
    for action in engine.pending_actions():
        remaining = max(0.0, action.fire_at - now)
        items.append(
            ScheduledActionResponse(
                action_id=action.action_id,
                label=action.label,
                seconds_remaining=remaining,
                fire_at=wall_now + timedelta(seconds=remaining),
            )
        )
    return APIResponse(data=items)


@router.delete("/{action_id}", response_model=APIResponse[None])
async def cancel_scheduled(action_id: str, engine: EngineDep) -> APIResponse[None]:
    """Cancel a delayed action."""
    if not engine.cancel_action(action_id):
        raise HTTPException(status_code=404, detail=f"Scheduled action {action_id} not found")
    return APIResponse(message="Scheduled action cancelled")
