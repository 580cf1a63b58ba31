"""Meeting endpoints: upload, list, and detail."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.models import UploadMeetingRequest
from src.models import Meeting
from src.runtime import Runtime, get_runtime

router = APIRouter()


@router.post("/api/meetings/upload", response_model=Meeting, status_code=201)
async def upload_meeting(
    request: UploadMeetingRequest,
    runtime: Annotated[Runtime, Depends(get_runtime)],
) -> Meeting:
    """Upload a meeting transcript and run action-item extraction.

    Returns the meeting as stored before extraction ran, i.e. with
    ``processed`` still false.
    """
    # Extraction and the confirmation email block, so run the chain off the event loop.
    return await asyncio.to_thread(
        runtime.pipeline.upload_meeting,
        title=request.title,
        transcript=request.transcript,
        uploaded_by=request.uploaded_by,
    )


@router.get("/api/meetings", response_model=list[Meeting])
async def list_meetings(runtime: Annotated[Runtime, Depends(get_runtime)]) -> list[Meeting]:
    """List all meetings ordered by creation date (newest first)."""
    return runtime.pipeline.list_meetings()


@router.get("/api/meetings/{meeting_id}", response_model=Meeting)
async def get_meeting(
    meeting_id: str,
    runtime: Annotated[Runtime, Depends(get_runtime)],
) -> Meeting:
    return runtime.pipeline.get_meeting(meeting_id)
