"""Celery application and beat schedule."""
from celery import Celery
from celery.schedules import crontab

from timedesk.config import settings

celery_app = Celery(
    "timedesk",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["timedesk.tasks.daily"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.TIMEZONE,
    enable_utc=True,
)

celery_app.conf.beat_schedule = {
    "update-overdue-tasks": {
        "task": "timedesk.tasks.daily.update_overdue_tasks",
        "schedule": crontab(minute=5, hour=0),
    },
    "duplicate-daily-tasks": {
        "task": "timedesk.tasks.daily.duplicate_daily_tasks",
        "schedule": crontab(minute=0, hour=18),
    },
    "reset-daily-tasks": {
        "task": "timedesk.tasks.daily.reset_daily_tasks",
        "schedule": crontab(minute=0, hour=0),
    },
}
