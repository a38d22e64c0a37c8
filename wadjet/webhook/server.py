"""FastAPI slash command server."""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from wadjet.exceptions import (
    HTTPError,
    InternalError,
    InvalidSlashRequestError,
    UnrecognizedCommandError,
)
from wadjet.slash_commands.dispatcher import Dispatcher
from wadjet.slash_commands.parser import parse_slash_command
from wadjet.slash_commands.registry import CommandRegistry, default_registry
from wadjet.slash_commands.responses import build_response, error_response
from wadjet.slash_commands.tokenizer import split_arguments
from wadjet.webhook.auth import DEFAULT_TOLERANCE, SignatureVerifier
from wadjet.webhook.config import WebhookSettings, load_config, parse_listen

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/v1/slack/slash"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting slash command server with commands: {', '.join(app.state.registry.names())}")
    yield
    logger.info("Shutting down slash command server")


def create_app(
    signing_secret: str = "",
    registry: Optional[CommandRegistry] = None,
    path: str = DEFAULT_PATH,
    timestamp_tolerance: float = DEFAULT_TOLERANCE,
) -> FastAPI:
    """Create and configure the FastAPI slash command application.

    Args:
        signing_secret: Slack signing secret; empty disables verification
        registry: Commands to serve (default: built-in commands)
        path: Endpoint path for slash command callbacks
        timestamp_tolerance: Allowed request timestamp skew in seconds

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Wadjet",
        description="Slack slash command endpoint",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    registry = registry if registry is not None else default_registry()
    dispatcher = Dispatcher(registry)
    app.state.registry = registry

    if not signing_secret:
        logger.warning("No signing secret configured; slash command signatures will not be verified")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render routing errors (404, 405) in the same shape as command errors."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.status_code, "error": str(exc.detail).lower()},
            headers=getattr(exc, "headers", None),
        )

    async def read_body(request: Request) -> tuple[bytes, Optional[SignatureVerifier]]:
        """Drain the request body, through a verifier when a secret is configured."""
        verifier = None
        if signing_secret:
            verifier = SignatureVerifier(request.headers, signing_secret, tolerance=timestamp_tolerance)

        stream = request.stream()
        if verifier is not None:
            stream = verifier.tee(stream)
        # The whole body is buffered before parsing so the signature check
        # always covers every byte the parser sees.
        body = b"".join([chunk async for chunk in stream])
        return body, verifier

    async def serve(request: Request) -> Response:
        client_ip = request.client.host if request.client else "unknown"
        try:
            body, verifier = await read_body(request)
            cmd = parse_slash_command(body)
            if verifier is not None:
                verifier.ensure()
        except InvalidSlashRequestError as e:
            logger.warning(f"Error parsing request from {client_ip}: {e.reason}")
            raise
        except HTTPError as e:
            logger.warning(
                f"AUDIT: Rejected slash request from {client_ip}: {e.message}",
                extra={
                    "event_type": "slash_signature_failed",
                    "client_ip": client_ip,
                    "reason": type(e).__name__,
                },
            )
            raise

        logger.info(
            f"AUDIT: Slash command invocation - {cmd.command}",
            extra={
                "event_type": "slash_command",
                "command": cmd.command,
                "user_id": cmd.user_id,
                "channel_id": cmd.channel_id,
                "trigger_id": cmd.trigger_id,
            },
        )

        args = split_arguments(cmd.text)
        try:
            result = await dispatcher.dispatch(cmd, args, request=request)
        except UnrecognizedCommandError as e:
            logger.warning(
                f"AUDIT: Unknown slash command - {e.name}",
                extra={
                    "event_type": "slash_command_unknown",
                    "command": cmd.command,
                    "user_id": cmd.user_id,
                    "channel_id": cmd.channel_id,
                },
            )
            raise
        if result.help_requested:
            logger.info(f"Help requested for {cmd.command}")
        return build_response(result)

    @app.post(path)
    async def handle_slash_command(request: Request):
        """Handle a slash command callback.

        Any ``HTTPError`` raised while serving becomes the single error
        response for the request; anything else is reported as a 500.
        """
        try:
            return await serve(request)
        except HTTPError as e:
            if e.code >= 500:
                logger.error(f"Slash command failed: {e.message}")
            return error_response(e)
        except Exception as e:
            logger.exception(f"Unexpected error handling slash command: {e}")
            return error_response(InternalError(f"unexpected error: {e}"))

    return app


def main(argv: Optional[list[str]] = None):
    """Run the slash command server."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Slack slash command server")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--listen", default=None, metavar="ADDRESS", help="HTTP listen address (host:port)")
    parser.add_argument("--slack-signing-secret", default=None, metavar="SECRET", help="The Slack signing secret")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    args = parser.parse_args(argv)

    # CLI > YAML > environment
    overrides = {}
    if args.config:
        if not Path(args.config).exists():
            parser.error(f"config file not found: {args.config}")
        overrides.update(load_config(args.config))
    if args.listen:
        try:
            overrides["host"], overrides["port"] = parse_listen(args.listen)
        except ValueError as e:
            parser.error(str(e))
    if args.slack_signing_secret is not None:
        overrides["signing_secret"] = args.slack_signing_secret
    if args.log_level:
        overrides["log_level"] = args.log_level
    try:
        settings = WebhookSettings(**overrides)
    except ValidationError as e:
        parser.error(f"invalid configuration: {e}")

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = create_app(
        signing_secret=settings.signing_secret,
        path=settings.path,
        timestamp_tolerance=settings.timestamp_tolerance,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
