"""Dashboard and reminder-trigger endpoints."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.models import SweepDetails, SweepResponse
from src.models import DashboardMetrics
from src.query.projections import dashboard_metrics
from src.runtime import Runtime, get_runtime

router = APIRouter()


@router.get("/api/dashboard", response_model=DashboardMetrics)
async def get_dashboard(runtime: Annotated[Runtime, Depends(get_runtime)]) -> DashboardMetrics:
    return dashboard_metrics(runtime.store)


@router.post("/api/reminders/run", response_model=SweepResponse)
async def run_reminders(runtime: Annotated[Runtime, Depends(get_runtime)]) -> SweepResponse:
    """Run the due/overdue sweep now instead of waiting for the daily job."""
    result = await asyncio.to_thread(runtime.run_sweep)
    return SweepResponse(
        message=f"Reminders triggered for {result.assignees} assignee(s)",
        details=SweepDetails(
            due_today=result.due_today,
            overdue=result.overdue,
            marked_overdue=result.marked_overdue,
        ),
    )
