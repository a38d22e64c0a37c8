"""Response synthesis for slash command invocations."""

import logging
from typing import Optional

from fastapi.responses import JSONResponse, Response

from wadjet.exceptions import HTTPError, InternalError
from wadjet.slash_commands.dispatcher import InvocationResult
from wadjet.slash_commands.models import EPHEMERAL, Reply

logger = logging.getLogger(__name__)


def select_reply(result: InvocationResult) -> Optional[Reply]:
    """Pick the reply for an invocation.

    A structured reply from the handler always wins and any captured output
    is dropped. Otherwise captured output becomes an ephemeral text reply.
    No reply and no output means there is nothing to say.
    """
    if result.reply is not None:
        if result.output:
            logger.debug(f"Discarding {len(result.output)} chars of captured output for {result.command.command}")
        return result.reply
    if result.output:
        return Reply(text=result.output, response_type=EPHEMERAL)
    return None


def build_response(result: InvocationResult) -> Response:
    """Build the HTTP response for a successful invocation."""
    reply = select_reply(result)
    if reply is None:
        # Nothing to say now; the command may answer later via response_url
        return Response(status_code=200)

    try:
        return JSONResponse(status_code=200, content=reply.model_dump(mode="json", exclude_none=True))
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to encode reply for {result.command.command}: {e}")
        raise InternalError(f"unable to encode response: {e}")


def error_response(error: HTTPError) -> JSONResponse:
    """Build the ``{"code", "error"}`` body for a failed request."""
    return JSONResponse(
        status_code=error.code,
        content={"code": error.code, "error": error.message},
    )
