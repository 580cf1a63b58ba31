"""Action item endpoints: filtered list and update."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.models import ActionListResponse, UpdateActionRequest
from src.models import ActionItem, ActionStatus, Priority
from src.query.projections import ActionFilters, list_actions
from src.runtime import Runtime, get_runtime

router = APIRouter()


@router.get("/api/actions", response_model=ActionListResponse)
async def get_actions(
    runtime: Annotated[Runtime, Depends(get_runtime)],
    status: ActionStatus | None = None,
    priority: Priority | None = None,
    assignee: str | None = None,
) -> ActionListResponse:
    """List action items, overdue first, then by due date and priority."""
    actions = list_actions(
        runtime.store,
        ActionFilters(status=status, priority=priority, assignee=assignee),
    )
    return ActionListResponse(actions=actions, total=len(actions))


@router.put("/api/actions/{action_id}", response_model=ActionItem)
async def update_action(
    action_id: str,
    request: UpdateActionRequest,
    runtime: Annotated[Runtime, Depends(get_runtime)],
) -> ActionItem:
    """Update status, assignee, or due date of an action item."""
    return runtime.pipeline.update_action(action_id, request.model_dump(exclude_unset=True))
