"""Chronicle reminder service.

Runs the reminder pollers for the configured tiers until interrupted.
"""

import asyncio
import signal

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from logger import logger
from domains.reminders import reset_store
from jobs import register_reminder_pollers


async def run() -> None:
    scheduler = AsyncIOScheduler()
    pollers = register_reminder_pollers(scheduler)
    if not pollers:
        logger.error("No reminder tiers enabled (set CHRONICLE_TIERS), exiting")
        return

    scheduler.start()
    logger.info(f"Scheduler started with {len(scheduler.get_jobs())} jobs")

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows: fall back to KeyboardInterrupt
            pass

    try:
        await stop.wait()
    finally:
        logger.info("Shutting down reminder service")
        scheduler.shutdown(wait=False)
        for poller in pollers:
            await poller.machine.drain()
        reset_store()


def main():
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
