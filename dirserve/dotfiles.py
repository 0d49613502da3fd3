"""
Middleware that hides dot files and dot directories.
"""
import logging

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


def has_dot_segment(path: str) -> bool:
    """True if any "/"-separated segment of path starts with a dot."""
    return any(part.startswith(".") for part in path.split("/"))


class DotFileMiddleware:
    """Answer 404 for any request path containing a dot-prefixed segment."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and has_dot_segment(scope["path"]):
            logger.debug(f"Hiding dot path {scope['path']}")
            response = PlainTextResponse("Not Found", status_code=404)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
