import asyncio
import signal
import logging
from typing import Optional
from hypercorn.asyncio import serve
from hypercorn.config import Config as HyperConfig

from aino.config import AppConfig
from aino.server.application import Application


class Server:
    def __init__(self, app: Application, config: Optional[AppConfig] = None):
        self.app = app
        self.config = config or app.config or AppConfig()
        self._shutdown_event: Optional[asyncio.Event] = None
        self.logger = logging.getLogger("aino.server")

    async def start(self) -> None:
        """Start serving until a shutdown signal arrives"""
        self._shutdown_event = asyncio.Event()
        self._setup_signal_handlers()

        hyper_config = self._create_hyper_config()

        server = self.config.server
        self.logger.info(f"Aino started on {server.url_scheme}://{server.public_host}:{server.public_port}")
        await serve(self.app, hyper_config, shutdown_trigger=self._shutdown_wait)

    def _create_hyper_config(self) -> HyperConfig:
        """Create Hypercorn configuration"""
        config = HyperConfig()
        config.bind = [f"{self.config.host}:{self.config.port}"]
        config.accesslog = "-" if self.config.server.access_log else None
        config.errorlog = "-"
        return config

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown"""
        loop = asyncio.get_running_loop()
        for sig in [signal.SIGTERM, signal.SIGINT]:
            loop.add_signal_handler(sig, lambda s=sig: self._handle_shutdown_signal(s))

    def _handle_shutdown_signal(self, sig: signal.Signals) -> None:
        """Handle shutdown signals gracefully"""
        sig_name = signal.Signals(sig).name
        self.logger.info(f"Received signal {sig_name}, shutting down gracefully...")
        self._shutdown_event.set()

    async def _shutdown_wait(self) -> None:
        await self._shutdown_event.wait()

    def run(self) -> None:
        """Run the server (blocking call)"""
        level = logging.DEBUG if self.config.debug else getattr(logging, self.config.logging.level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        try:
            asyncio.run(self.start())
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")

        self.logger.info("Server shutdown complete")


__all__ = ['Server']
