"""
APScheduler: periodic sweep of expired OTP records.
"""
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from shop_auth.services.otp_service import OtpManager

logger = logging.getLogger("shop-auth")


def start_sweeper(manager: OtpManager, interval_seconds: int) -> AsyncIOScheduler:
    """Start a scheduler that purges expired codes every interval_seconds. Call from a running loop."""
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        sweep_expired,
        IntervalTrigger(seconds=interval_seconds),
        args=[manager],
        id="otp_sweep",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("OTP sweeper started: every %ss", interval_seconds)
    return scheduler


async def sweep_expired(manager: OtpManager) -> int:
    try:
        removed = manager.purge_expired()
    except Exception as e:
        logger.error("OTP sweep failed: %s", e)
        return 0
    if removed:
        logger.info("OTP sweep removed %d expired codes", removed)
    return removed


def stop_sweeper(scheduler: AsyncIOScheduler | None) -> None:
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("OTP sweeper stopped")
