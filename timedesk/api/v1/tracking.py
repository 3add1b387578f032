"""Time tracking API endpoints.

All endpoints act for the employee resolved by ``get_actor_context``: the
caller's own profile, or the one named in the impersonation header.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.core.context import ActorContext
from timedesk.database import get_db
from timedesk.dependencies import get_actor_context
from timedesk.schemas.task import TaskResponse
from timedesk.schemas.time_record import SessionView, TimeRecordResponse, WorkedToday
from timedesk.services.hours_service import hours_service
from timedesk.services.session_service import session_service

router = APIRouter()


def _view(record) -> SessionView:
    view = session_service.describe(record)
    task = view["task"]
    return SessionView(
        record=TimeRecordResponse.model_validate(view["record"]),
        task=TaskResponse.model_validate(task) if task is not None else None,
        worked_ms=view["worked_ms"],
        worked_display=view["worked_display"],
    )


@router.get("/shift", response_model=SessionView)
async def get_shift(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    """Today's shift record; opened on first access."""
    record = await session_service.open_shift(db, ctx)
    return _view(record)


@router.post("/shift/start", response_model=SessionView)
async def start_shift(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    record = await session_service.start_shift(db, ctx)
    return _view(record)


@router.get("/tasks/available", response_model=List[TaskResponse])
async def list_available_tasks(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    """Assigned tasks that can be accepted now."""
    return await session_service.list_available_tasks(db, ctx)


@router.get("/tasks/active", response_model=List[SessionView])
async def list_active_sessions(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    records = await session_service.list_active_sessions(db, ctx)
    return [_view(record) for record in records]


@router.post(
    "/tasks/{task_id}/accept",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
)
async def accept_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    """Start a working session on a task."""
    record = await session_service.accept_task(db, ctx, task_id)
    return _view(record)


@router.get("/records/{record_id}", response_model=SessionView)
async def get_record(
    record_id: UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    record = await session_service.get_record(db, ctx, record_id)
    return _view(record)


@router.post("/records/{record_id}/pause", response_model=SessionView)
async def pause_record(
    record_id: UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    record = await session_service.pause(db, ctx, record_id)
    return _view(record)


@router.post("/records/{record_id}/resume", response_model=SessionView)
async def resume_record(
    record_id: UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    record = await session_service.resume(db, ctx, record_id)
    return _view(record)


@router.post("/records/{record_id}/finish", response_model=SessionView)
async def finish_record(
    record_id: UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    """Finish a session; its task, if any, becomes completed."""
    record = await session_service.finish(db, ctx, record_id)
    return _view(record)


@router.get("/worked-today", response_model=WorkedToday)
async def worked_today(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor_context),
):
    return await hours_service.worked_today(db, ctx.employee, locale=ctx.locale)
