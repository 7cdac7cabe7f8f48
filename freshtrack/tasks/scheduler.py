"""
Configuration du scheduler pour les vérifications périodiques
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from typing import Optional
import logging

from freshtrack.core.config import settings
from freshtrack.repositories.base import ProductRepository
from freshtrack.tasks.expiry_checker import check_expiring_products, send_daily_reminder

logger = logging.getLogger(__name__)

_scheduler: Optional[AsyncIOScheduler] = None


def start_scheduler(product_repository: ProductRepository) -> Optional[AsyncIOScheduler]:
    """
    Démarre le scheduler dans la boucle asyncio courante

    Tâches planifiées:
    1. Vérification des produits expirant bientôt (toutes les heures)
    2. Rappel quotidien (tous les jours à DAILY_REMINDER_TIME)
    """
    global _scheduler

    if not settings.SCHEDULER_ENABLED:
        logger.warning("Scheduler is disabled in settings")
        return None

    logger.info("Starting scheduler...")
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        check_expiring_products,
        trigger=IntervalTrigger(hours=settings.ALERT_CHECK_INTERVAL_HOURS),
        args=[product_repository],
        id="check_expiring",
        name="Check products expiring soon",
        replace_existing=True,
        misfire_grace_time=300,
    )
    logger.info(
        f"Scheduled: Expiry check (every {settings.ALERT_CHECK_INTERVAL_HOURS}h)"
    )

    if settings.DAILY_REMINDER_ENABLED:
        hour, minute = settings.DAILY_REMINDER_TIME.split(":")

        scheduler.add_job(
            send_daily_reminder,
            trigger=CronTrigger(hour=int(hour), minute=int(minute)),
            args=[product_repository],
            id="daily_reminder",
            name="Send daily expiry reminder",
            replace_existing=True,
        )
        logger.info(
            f"Scheduled: Daily reminder (every day at {settings.DAILY_REMINDER_TIME})"
        )

    scheduler.start()
    _scheduler = scheduler
    logger.info("Scheduler started successfully")
    return scheduler


def stop_scheduler():
    global _scheduler

    if _scheduler is None:
        return

    logger.info("Stopping scheduler...")
    if _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None
    logger.info("Scheduler stopped")


def get_scheduler_status():
    """
    Retourne le statut du scheduler et de ses tâches
    """
    if _scheduler is None or not _scheduler.running:
        return {"running": False, "jobs": []}

    jobs = []
    for job in _scheduler.get_jobs():
        jobs.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run": (
                    job.next_run_time.isoformat() if job.next_run_time else None
                ),
                "trigger": str(job.trigger),
            }
        )

    return {"running": True, "jobs": jobs}
