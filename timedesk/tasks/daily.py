"""Celery tasks for daily task maintenance."""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import retry, stop_after_attempt, wait_exponential

from timedesk.config import settings
from timedesk.database import build_engine, build_sessionmaker
from timedesk.services.task_service import task_service
from timedesk.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)

# Worker processes get their own engine, disposed after every job
engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_sessionmaker(engine)


async def _run(operation):
    """Run one service call in its own session, then release the pool."""
    try:
        async with AsyncSessionLocal() as db:
            return await operation(db)
    finally:
        await engine.dispose()


async def _duplicate_daily(db: AsyncSession) -> int:
    created = await task_service.duplicate_daily_tasks(db)
    return len(created)


@celery_app.task(bind=True, max_retries=3)
@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=4, max=10))
def update_overdue_tasks(self):
    """Mark tasks past their due date as overdue."""
    count = asyncio.run(_run(task_service.update_overdue_tasks))
    logger.info(f"update_overdue_tasks: {count} tasks affected")
    return {"affected": count}


@celery_app.task(bind=True, max_retries=3)
@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=4, max=10))
def duplicate_daily_tasks(self):
    """Create tomorrow's copies of daily tasks."""
    count = asyncio.run(_run(_duplicate_daily))
    logger.info(f"duplicate_daily_tasks: {count} tasks created")
    return {"affected": count}


@celery_app.task(bind=True, max_retries=3)
@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=4, max=10))
def reset_daily_tasks(self):
    count = asyncio.run(_run(task_service.reset_daily_tasks))
    logger.info(f"reset_daily_tasks: {count} tasks reset")
    return {"affected": count}
