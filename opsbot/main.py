import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from .config import Settings, load_settings
from .errors import InvalidSignature, MalformedPayload
from .router import Dispatcher
from .security import verify_signature

logger = logging.getLogger(__name__)

# GitHub redelivers on any non-2xx answer, so every delivery gets this body
ACK = "ok"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


class AckGuard:
    """ASGI middleware that exits the process if a response cannot be written.

    A failed write means the transport itself is broken; the process manager
    is expected to restart the bot.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def guarded_send(message):
            try:
                await send(message)
            except OSError as e:
                logger.critical("write response error: %s", e)
                os._exit(1)

        await self.app(scope, receive, guarded_send)


def create_app(settings: Optional[Settings] = None, dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    dispatcher = dispatcher or Dispatcher(settings)

    app = FastAPI(title="OpsBot", version="0.1.0")
    app.add_middleware(AckGuard)

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.post("/webhook", response_class=PlainTextResponse)
    async def webhook(request: Request):
        raw = await request.body()
        event = request.headers.get("X-GitHub-Event", "")
        delivery = request.headers.get("X-GitHub-Delivery", "")

        try:
            verify_signature(settings.webhook_secret, raw, request.headers.get("X-Hub-Signature-256"))
        except InvalidSignature as e:
            logger.warning("rejected delivery %s (%s): %s", delivery, event, e)
            return ACK

        try:
            outcome = await run_in_threadpool(dispatcher.dispatch, raw, event)
        except MalformedPayload as e:
            logger.warning("could not parse webhook %s: %s", delivery, e)
            return ACK
        except Exception:
            logger.exception("error handling delivery %s (%s)", delivery, event)
            return ACK

        logger.info(
            "delivery %s: %s %s (%d action(s))",
            delivery,
            outcome.event,
            outcome.status.value,
            len(outcome.results),
        )
        return ACK

    return app


app = create_app()
