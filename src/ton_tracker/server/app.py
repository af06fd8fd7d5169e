"""HTTP surface: TonAPI webhook callback and health check (aiohttp.web)."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog
from aiohttp import web

from ton_tracker.models.webhook import WebhookPayload

if TYPE_CHECKING:
    from ton_tracker.config import Settings
    from ton_tracker.services.webhook import EventReceiver


class WebhookServer:
    """Acknowledges webhook deliveries immediately and hands them to the receiver.

    Routes:
        POST /webhook, /webhook/ : 200 on any decodable JSON object (processing
            happens in the background), 400 on undecodable JSON, 405 for
            other methods.
        GET /health, / : 200 "OK".
    """

    def __init__(
        self,
        settings: Settings,
        receiver: EventReceiver,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._settings = settings
        self._receiver = receiver
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._runner: Optional[web.AppRunner] = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    def create_app(self) -> web.Application:
        app = web.Application()
        for path in ("/webhook", "/webhook/"):
            app.router.add_route("*", path, self._handle_webhook)
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/", self._handle_health)
        return app

    async def start(self) -> None:
        """Bind and start listening on webhook.host:webhook.port."""
        if self._runner is not None:
            return
        cfg = self._settings.webhook
        runner = web.AppRunner(self.create_app(), access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, cfg.host, cfg.port)
        try:
            await site.start()
        except OSError:
            await runner.cleanup()
            raise
        self._runner = runner
        self._logger.info("webhook_server_started", server_host=cfg.host, server_port=cfg.port)

    async def stop(self) -> None:
        """Stop accepting requests and release the listening socket."""
        runner, self._runner = self._runner, None
        if runner is None:
            return
        await runner.cleanup()
        self._logger.info("webhook_server_stopped")

    async def _handle_webhook(self, request: web.Request) -> web.Response:
        if request.method != "POST":
            return web.Response(status=405, text="Method Not Allowed", headers={"Allow": "POST"})

        body = await request.read()
        try:
            data = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self._logger.warning("webhook_invalid_json", error_message=str(e))
            return web.Response(status=400, text="Invalid JSON")
        if not isinstance(data, dict):
            self._logger.warning("webhook_invalid_json", error_message="body is not an object")
            return web.Response(status=400, text="Invalid JSON")

        payload = WebhookPayload.from_response(data)
        outcome = self._receiver.accept(payload)
        self._logger.debug(
            "webhook_received",
            webhook_event_type=payload.event_type,
            webhook_outcome=outcome.value,
        )
        return web.Response(status=200, text="OK")

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.Response(status=200, text="OK")
