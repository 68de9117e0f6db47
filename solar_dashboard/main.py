"""Main entry point for the FusionSolar dashboard poller."""

import asyncio
import logging
import signal
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import settings
from .display import render_dashboard
from .relay_client import RelayClient
from .session import DashboardSession

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("solar-dashboard")


class Dashboard:
    """Logs in through the relay and polls plant KPIs on an interval."""

    def __init__(self, client: Optional[RelayClient] = None, out=None):
        self.client = client or RelayClient(settings.relay_url, timeout=settings.relay_timeout)
        self.session = DashboardSession(
            self.client,
            development=settings.is_development,
            relay_port=settings.relay_port,
        )
        self.out = out or sys.stdout
        self.running = False
        self.last_poll: Optional[datetime] = None
        self._stop_event = asyncio.Event()

    async def start(self):
        """Start the dashboard service."""
        logger.info("=" * 60)
        logger.info("FusionSolar Dashboard - Poller Service")
        logger.info("=" * 60)
        logger.info(f"Relay: {settings.relay_url}")
        logger.info(f"Polling interval: {settings.poll_interval}s")

        if not settings.fusionsolar_username or not settings.fusionsolar_system_code:
            logger.error(
                "No credentials configured! Set FUSIONSOLAR_USERNAME and "
                "FUSIONSOLAR_SYSTEM_CODE in .secrets or the environment."
            )
            return

        if not await self.session.login(settings.fusionsolar_username, settings.fusionsolar_system_code):
            logger.error(f"Login failed: {self.session.error}")
            return

        if settings.station_codes:
            self.session.select_plants(settings.station_codes)
        logger.info(f"Selected plants: {self.session.selected_plants}")

        self.running = True
        await self._run_polling_loop()

    async def stop(self):
        """Stop the dashboard service."""
        logger.info("Stopping dashboard service...")
        self.running = False
        self._stop_event.set()
        self.session.logout()
        await self.client.close()
        logger.info("Dashboard service stopped")

    async def poll_once(self):
        """Refresh KPIs and print the dashboard."""
        self.last_poll = datetime.now(timezone.utc)
        await self.session.fetch_real_time_data()
        print(render_dashboard(self.session), file=self.out, flush=True)

    async def _run_polling_loop(self):
        """Main polling loop."""
        logger.info("Starting polling loop...")

        while self.running:
            if not self.session.selected_plants:
                logger.warning("No plants selected - nothing to poll")
            else:
                await self.poll_once()

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=settings.poll_interval)
            except asyncio.TimeoutError:
                pass


async def main():
    """Main entry point."""
    dashboard = Dashboard()

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    def shutdown_handler():
        logger.info("Shutdown signal received")
        asyncio.create_task(dashboard.stop())

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, shutdown_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    try:
        await dashboard.start()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        await dashboard.stop()


def run():
    """Console entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
