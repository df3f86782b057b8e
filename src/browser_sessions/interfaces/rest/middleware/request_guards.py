"""
Request guards for the session endpoint.

Each guard wraps an inner handler (``async (Request) -> Response``) and either
short-circuits with a fixed plain-text error or passes the request through
unchanged. Guards never touch the session launcher.
"""

from functools import wraps
from typing import Awaitable, Callable

from starlette.requests import Request, empty_receive
from starlette.responses import PlainTextResponse, Response

from browser_sessions.infrastructure.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[Request], Awaitable[Response]]

CLOSE_NOTIFIER_ERROR = "unable to handle client close notifications"
METHOD_NOT_ALLOWED_ERROR = "Method not allowed"


def supports_close_notifications(request: Request) -> bool:
    """
    Whether the transport can report client disconnects.

    Disconnects arrive as ``http.disconnect`` messages on the ASGI receive
    channel, so a request without one cannot be cancelled early.
    """
    return request.scope.get("type") == "http" and request.receive is not empty_receive


def ensure_close_notifier(next_handler: Handler) -> Handler:
    """Reject requests whose transport cannot report client disconnects (500)."""

    @wraps(next_handler)
    async def handler(request: Request) -> Response:
        if not supports_close_notifications(request):
            logger.error("Transport cannot report client disconnects", path=request.url.path)
            return PlainTextResponse(CLOSE_NOTIFIER_ERROR, status_code=500)
        return await next_handler(request)

    return handler


def ensure_post(next_handler: Handler) -> Handler:
    """Reject any non-POST request (405)."""

    @wraps(next_handler)
    async def handler(request: Request) -> Response:
        if request.method != "POST":
            logger.debug("Rejected non-POST request", method=request.method, path=request.url.path)
            return PlainTextResponse(METHOD_NOT_ALLOWED_ERROR, status_code=405)
        return await next_handler(request)

    return handler
