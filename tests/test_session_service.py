"""Tests for work session transitions."""
from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from timedesk.core.context import ActorContext
from timedesk.core.exceptions import ConflictError, NotFoundError
from timedesk.crud.time_record import time_record as time_record_crud
from timedesk.models.employee import Employee
from timedesk.models.task import TaskStatus
from timedesk.models.time_record import TimeRecordStatus
from timedesk.services.session_service import session_service

NINE = datetime(2024, 3, 4, 9, 0, 0)


@pytest.mark.asyncio
async def test_accept_creates_working_record_and_starts_task(db_session, actor, make_task):
    task = await make_task(actor.employee)

    record = await session_service.accept_task(db_session, actor, task.id, now=NINE)

    assert record.status == TimeRecordStatus.WORKING
    assert record.start_time == NINE
    assert record.pause_duration == 0
    assert record.task_id == task.id
    assert record.date == NINE.date()
    await db_session.refresh(task)
    assert task.status == TaskStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_accept_moves_task_from_available_to_active_once(db_session, actor, make_task):
    task = await make_task(actor.employee)
    other = await make_task(actor.employee, title="Review")

    available = await session_service.list_available_tasks(db_session, actor, now=NINE)
    assert {item.id for item in available} == {task.id, other.id}

    await session_service.accept_task(db_session, actor, task.id, now=NINE)

    available = await session_service.list_available_tasks(db_session, actor, now=NINE)
    active = await session_service.list_active_sessions(db_session, actor, now=NINE)
    assert [item.id for item in available] == [other.id]
    assert [record.task_id for record in active] == [task.id]

    with pytest.raises(ConflictError):
        await session_service.accept_task(
            db_session, actor, task.id, now=NINE + timedelta(minutes=1)
        )
    active = await session_service.list_active_sessions(db_session, actor, now=NINE)
    assert len(active) == 1


@pytest.mark.asyncio
async def test_accept_rejects_foreign_archived_and_completed_tasks(db_session, actor, make_task):
    foreign = await make_task(None, title="Unassigned")
    archived = await make_task(actor.employee, title="Old", archived=True)
    done = await make_task(actor.employee, title="Done", status=TaskStatus.COMPLETED)

    with pytest.raises(NotFoundError):
        await session_service.accept_task(db_session, actor, foreign.id, now=NINE)
    with pytest.raises(NotFoundError):
        await session_service.accept_task(db_session, actor, uuid4(), now=NINE)
    with pytest.raises(ConflictError):
        await session_service.accept_task(db_session, actor, archived.id, now=NINE)
    with pytest.raises(ConflictError):
        await session_service.accept_task(db_session, actor, done.id, now=NINE)


@pytest.mark.asyncio
async def test_pause_resume_finish_scenario(db_session, actor, make_task):
    """09:00 start, 09:30 pause, 10:00 resume, 11:00 finish -> 1.5 hours."""
    task = await make_task(actor.employee)
    record = await session_service.accept_task(db_session, actor, task.id, now=NINE)

    record = await session_service.pause(
        db_session, actor, record.id, now=NINE + timedelta(minutes=30)
    )
    assert record.status == TimeRecordStatus.PAUSED
    assert record.pause_started_at == NINE + timedelta(minutes=30)

    view = session_service.describe(record, now=NINE + timedelta(minutes=45))
    assert view["worked_ms"] == 30 * 60 * 1000
    assert view["worked_display"] == "00:30:00"

    record = await session_service.resume(
        db_session, actor, record.id, now=NINE + timedelta(hours=1)
    )
    assert record.status == TimeRecordStatus.WORKING
    assert record.pause_duration == 30
    assert record.pause_started_at is None

    record = await session_service.finish(
        db_session, actor, record.id, now=NINE + timedelta(hours=2)
    )
    assert record.status == TimeRecordStatus.FINISHED
    assert record.end_time == NINE + timedelta(hours=2)
    assert record.total_hours == pytest.approx(1.5)

    await db_session.refresh(task)
    assert task.status == TaskStatus.COMPLETED
    assert task.completed_at == NINE + timedelta(hours=2)

    pauses = await time_record_crud.list_pauses(db_session, record_id=record.id)
    assert len(pauses) == 1
    assert pauses[0].pause_end == NINE + timedelta(hours=1)
    assert pauses[0].worked_seconds_before_pause == 30 * 60


@pytest.mark.asyncio
async def test_finish_while_paused_folds_open_pause(db_session, actor, make_task):
    task = await make_task(actor.employee)
    record = await session_service.accept_task(db_session, actor, task.id, now=NINE)
    await session_service.pause(db_session, actor, record.id, now=NINE + timedelta(hours=1))

    record = await session_service.finish(
        db_session, actor, record.id, now=NINE + timedelta(hours=1, minutes=20)
    )

    assert record.status == TimeRecordStatus.FINISHED
    assert record.pause_duration == 20
    assert record.total_hours == pytest.approx(1.0)
    assert record.pause_started_at is None


@pytest.mark.asyncio
async def test_invalid_transitions_conflict(db_session, actor, make_task):
    task = await make_task(actor.employee)
    record = await session_service.accept_task(db_session, actor, task.id, now=NINE)

    with pytest.raises(ConflictError):
        await session_service.resume(db_session, actor, record.id, now=NINE)

    await session_service.finish(db_session, actor, record.id, now=NINE + timedelta(hours=1))

    for action in (session_service.pause, session_service.resume, session_service.finish):
        with pytest.raises(ConflictError) as exc_info:
            await action(db_session, actor, record.id, now=NINE + timedelta(hours=2))
        assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_records_of_other_employees_are_not_found(db_session, actor, make_task):
    task = await make_task(actor.employee)
    record = await session_service.accept_task(db_session, actor, task.id, now=NINE)

    stranger = Employee(id=uuid4(), full_name="Stranger", email="stranger@example.com")
    db_session.add(stranger)
    await db_session.commit()
    other_ctx = ActorContext(user=actor.user, employee=stranger)

    with pytest.raises(NotFoundError):
        await session_service.pause(db_session, other_ctx, record.id, now=NINE)


@pytest.mark.asyncio
async def test_shift_is_opened_once_and_started(db_session, actor):
    shift = await session_service.open_shift(db_session, actor, now=NINE)
    assert shift.status == TimeRecordStatus.NOT_STARTED
    assert shift.task_id is None
    assert shift.login_time == NINE

    again = await session_service.open_shift(db_session, actor, now=NINE + timedelta(hours=1))
    assert again.id == shift.id

    started = await session_service.start_shift(
        db_session, actor, now=NINE + timedelta(minutes=5)
    )
    assert started.id == shift.id
    assert started.status == TimeRecordStatus.WORKING
    assert started.start_time == NINE + timedelta(minutes=5)

    with pytest.raises(ConflictError):
        await session_service.start_shift(db_session, actor, now=NINE + timedelta(minutes=6))


@pytest.mark.asyncio
async def test_concurrent_accepts_both_create_records(db_session, session_factory, actor, make_task, monkeypatch):
    """Accept is not serialized: two checks that run before either commit both pass."""
    task = await make_task(actor.employee)
    list_active = time_record_crud.list_active_task_records
    seen = []

    async def check_while_other_accepts(db, **kwargs):
        active = await list_active(db, **kwargs)
        seen.append(active)
        if len(seen) == 1:
            # The other request checks and commits before this one commits
            async with session_factory() as other:
                await session_service.accept_task(other, actor, task.id, now=NINE)
        return active

    monkeypatch.setattr(time_record_crud, "list_active_task_records", check_while_other_accepts)

    first = await session_service.accept_task(db_session, actor, task.id, now=NINE)

    assert seen == [[], []]
    records = await list_active(
        db_session, employee_id=actor.employee.id, on_date=first.date, task_id=task.id
    )
    assert len(records) == 2
    assert {record.status for record in records} == {TimeRecordStatus.WORKING}
