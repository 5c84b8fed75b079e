"""Periodic event refresh.

Re-fetches the event list on an interval and reprints today's cell. Each
refresh replaces the previous snapshot; there is no merging.
"""

import logging
from datetime import date
from typing import Callable

import requests
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.events_api import AuthenticationError
from .config import Config, load_config
from .workflows import compile_day

logger = logging.getLogger(__name__)


def setup_scheduler(callback: Callable[[], None], config: Config | None = None) -> BlockingScheduler:
    """Set up the refresh job."""
    if config is None:
        config = load_config()

    scheduler = BlockingScheduler(timezone=config.timezone or None)
    minutes = config.refresh_minutes
    if minutes < 1:
        logger.warning(f"Invalid refresh interval {minutes}, using 5 minutes")
        minutes = 5

    scheduler.add_job(
        callback,
        IntervalTrigger(minutes=minutes),
        id="refresh_events",
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Scheduled event refresh every {minutes} min")
    return scheduler


def refresh_today(config: Config, echo: Callable[[str], None] = print) -> bool:
    """Fetch events and print today's cell. Returns False if the refresh failed."""
    try:
        echo(compile_day(config, date.today()))
    except (AuthenticationError, requests.RequestException) as e:
        logger.error(f"Refresh failed: {e}")
        return False
    return True


def run_watch(config: Config | None = None, echo: Callable[[str], None] = print) -> None:
    """Refresh once, then keep refreshing until interrupted."""
    config = config or load_config()
    refresh_today(config, echo)

    scheduler = setup_scheduler(lambda: refresh_today(config, echo), config)
    logger.info("Starting event refresher...")
    scheduler.start()
