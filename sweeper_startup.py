import asyncio
import logging
import signal
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from clinicbook.adapters.db.mongo.client import init_database
from clinicbook.core.config import get_settings
from clinicbook.core.structured_logger import configure_logging
from clinicbook.workers.appointment_cleanup_sweeper import run_appointment_cleanup_forever

logger = logging.getLogger("clinicbook")


async def _init_db(settings) -> Optional[AsyncIOMotorClient]:
    """Initialize MongoDB connection for the sweeper."""
    if settings.store_backend != "mongo":
        logger.warning("Standalone sweeper with the in-memory store only sees its own process data")
        return None
    return await init_database(settings.database)


async def main() -> None:
    """
    Entry point for the appointment cleanup sweeper.

    Run this separately when the API is started with CLEANUP_SWEEPER_ENABLED=false:
        PYTHONPATH=./src python3 sweeper_startup.py
    """
    settings = get_settings()
    configure_logging(settings.logging)
    if not settings.cleanup.sweeper_enabled:
        logger.info(
            "Appointment cleanup sweeper is disabled. "
            "Set CLEANUP_SWEEPER_ENABLED=true to enable."
        )
        return

    logger.info("Starting appointment cleanup sweeper…")
    logger.info(
        "Sweeper config: interval=%ss, timezone=%s",
        settings.cleanup.sweeper_interval_seconds,
        settings.booking.timezone,
    )

    client = await _init_db(settings)

    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received for sweeper, stopping gracefully…")
        stop_event.set()

    loop = asyncio.get_running_loop()
    if hasattr(signal, "SIGTERM"):
        loop.add_signal_handler(signal.SIGTERM, _signal_handler)
    if hasattr(signal, "SIGINT"):
        loop.add_signal_handler(signal.SIGINT, _signal_handler)

    try:
        sweeper_task = asyncio.create_task(run_appointment_cleanup_forever())
        await stop_event.wait()
        sweeper_task.cancel()
        try:
            await sweeper_task
        except asyncio.CancelledError:
            logger.info("Sweeper task cancelled.")
    finally:
        if client:
            client.close()
            logger.info("Sweeper MongoDB client closed.")


if __name__ == "__main__":
    asyncio.run(main())
