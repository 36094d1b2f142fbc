"""procrelay - relays process manager events to Telegram."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from procrelay.bus import LocalEventBus
from procrelay.channels.base import BaseChannel
from procrelay.channels.telegram import TelegramChannel
from procrelay.config import Settings, get_settings, load_module_config
from procrelay.models.config import ModuleConfig
from procrelay.models.event import EventKind
from procrelay.notifier import Notifier
from procrelay.queue import SerialQueue
from procrelay.resolver import DestinationResolver
from procrelay.router import EventRouter
from procrelay.sources.base import BaseSource
from procrelay.sources.pm2 import Pm2Source

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    module_config: ModuleConfig,
    channel: BaseChannel | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Wire resolver, queue, router and bus into a FastAPI application."""
    settings = settings or get_settings()
    if channel is None:
        channel = TelegramChannel(
            api_base=settings.telegram_api_base,
            timeout=settings.request_timeout,
        )

    resolver = DestinationResolver(module_config)
    notifier = Notifier(resolver, channel)
    queue = SerialQueue(notifier.notify)
    router = EventRouter(module_config, queue)
    bus = LocalEventBus()
    router.attach(bus)

    source: BaseSource = Pm2Source()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        await queue.start()
        logger.info(f"procrelay started as {module_config.module_name}")

        yield

        await queue.stop()
        logger.info("procrelay stopped")

    app = FastAPI(
        title="procrelay",
        description="Relays process manager events to Telegram through a serial queue",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.module_config = module_config
    app.state.resolver = resolver
    app.state.queue = queue
    app.state.router = router
    app.state.bus = bus

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/queue")
    async def queue_status() -> dict[str, int]:
        """Pending message count and the drop limit for log lines."""
        return {"pending": queue.pending_count(), "limit": module_config.queue_limit}

    @app.post("/bus/{kind}")
    async def publish_event(kind: str, request: Request) -> JSONResponse:
        """Receive one event forwarded from the process manager bus."""
        try:
            event_kind = EventKind(kind)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown event kind: {kind}",
            )

        try:
            payload: Any = await request.json()
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Payload is not valid JSON",
            )
        if not isinstance(payload, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Payload must be a JSON object",
            )

        try:
            event = source.parse(event_kind, payload)
        except Exception as e:
            logger.warning(f"Failed to parse {source.name} {kind} payload: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid payload: {e}",
            )

        if not bus.publish(event):
            return JSONResponse(
                status_code=status.HTTP_200_OK,
                content={"status": "ignored", "kind": kind},
            )

        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content={"status": "accepted", "kind": kind},
        )

    return app


def run() -> int:
    """Load configuration and serve until the process is signalled."""
    settings = get_settings()

    # Configure logging level
    logging.getLogger().setLevel(settings.log_level.upper())

    try:
        module_config = load_module_config(settings.module_config_path)
    except Exception as e:
        logger.error(f"Failed to load module config {settings.module_config}: {e}")
        sys.exit(1)

    app = create_app(module_config, settings=settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(run())
