from celery import Celery
from celery.schedules import crontab
from celery.signals import after_setup_logger, worker_shutdown

from picksync.config import get_settings
from picksync.services.sync_lock import close_redis
from picksync.utils.async_celery import cleanup_event_loop, run_async

settings = get_settings()

celery_app = Celery(
    "picksync_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["picksync.tasks.sync_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
)

if settings.sync_enabled:
    celery_app.conf.beat_schedule = {
        "sync-competitors-daily": {
            "task": "picksync.tasks.sync_tasks.sync_competitors",
            "schedule": crontab(hour=6, minute=0),
        },
        "sync-events-every-2h": {
            "task": "picksync.tasks.sync_tasks.sync_events",
            "schedule": crontab(minute=0, hour="*/2"),
        },
        "refresh-season-status-daily": {
            "task": "picksync.tasks.sync_tasks.refresh_season_status",
            "schedule": crontab(hour=5, minute=30),
        },
    }
else:
    celery_app.conf.beat_schedule = {}


@after_setup_logger.connect
def configure_logging(logger, **kwargs):
    logger.setLevel(settings.log_level.upper())


@worker_shutdown.connect
def shutdown_event_loop(**kwargs):
    run_async(close_redis())
    cleanup_event_loop()
