"""
Index router: decides how each request under the mount prefix is answered.

Every request ends in exactly one outcome:

    NotFound     -> 404
    Delegate     -> raw per-file responder (redirects, implicit index, files)
    ServeFile    -> a specific file (explicit index.html, SPA fallback)
    ListingView  -> rendered directory listing
"""
import logging
import os
import stat
from typing import Optional, Union

from fastapi import HTTPException, Request
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from starlette.responses import FileResponse, Response

from .config import ServeConfig
from .files import FileResponder
from .listing import INDEX_FILE, ListingView, list_directory
from .results import Delegate, NotFound, ServeFile
from .urlpath import url_segments

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")
HTML_MEDIA_TYPE = "text/html; charset=utf-8"

Outcome = Union[NotFound, Delegate, ServeFile, ListingView]


class IndexRouter:
    """Routes requests to listings, index documents or the file responder."""

    def __init__(
        self,
        config: ServeConfig,
        responder: Optional[FileResponder] = None,
        templates: Optional[Jinja2Templates] = None,
    ):
        self.config = config
        self.root = str(config.directory)
        self.prefix = config.prefix
        self.responder = responder or FileResponder(directory=self.root)
        self.templates = templates or Jinja2Templates(directory=TEMPLATES_DIR)

    def physical_path(self, url_path: str) -> str:
        return os.path.join(self.root, *url_segments(url_path))

    def resolve(self, request_path: str) -> Outcome:
        """Classify a request path. Filesystem errors other than "missing" are raised."""
        if not request_path.startswith(self.prefix):
            return NotFound(f"{request_path} is outside {self.prefix}")

        url_path = "/" + request_path[len(self.prefix):]

        if self.config.explicit_index and url_path.endswith("/" + INDEX_FILE):
            return self.explicit_index(url_path)

        if not url_path.endswith("/"):
            if self.config.spa:
                fallback = self.spa_fallback(url_path)
                if fallback is not None:
                    return fallback
            return Delegate(url_path)

        return list_directory(
            self.root,
            url_path,
            self.prefix,
            self.config.root_label,
            include_dotfiles=self.config.dot,
            explicit_index=self.config.explicit_index,
        )

    def explicit_index(self, url_path: str) -> Union[ServeFile, NotFound]:
        """Serve an index.html named in the URL instead of redirecting to its directory."""
        path = self.physical_path(url_path)
        try:
            stat_result = os.stat(path)
        except FileNotFoundError:
            return NotFound(f"{url_path} does not exist")

        if not stat.S_ISREG(stat_result.st_mode):
            return NotFound(f"{url_path} is not a file")
        return ServeFile(path, stat_result, media_type=HTML_MEDIA_TYPE)

    def spa_fallback(self, url_path: str) -> Union[ServeFile, NotFound, None]:
        """Root index.html for a path that does not exist, None if it does."""
        if url_path.endswith("/" + INDEX_FILE):
            # the responder redirects these to "./"
            return None

        try:
            os.stat(self.physical_path(url_path))
            return None
        except NotADirectoryError:
            # a file used as a directory; the responder answers 404
            return None
        except FileNotFoundError:
            pass

        index_path = os.path.join(self.root, INDEX_FILE)
        try:
            index_stat = os.stat(index_path)
        except FileNotFoundError:
            return NotFound(f"{url_path} does not exist and there is no {INDEX_FILE}")

        logger.debug(f"SPA fallback for {url_path}")
        return ServeFile(index_path, index_stat)

    async def dispatch(self, request: Request, outcome: Outcome) -> Response:
        """Turn a routing outcome into a response."""
        if isinstance(outcome, NotFound):
            raise HTTPException(status_code=404, detail="Not Found")

        if isinstance(outcome, Delegate):
            logger.debug(f"Delegating {outcome.url_path} to the file responder")
            return await self.responder.respond(outcome.url_path, request.scope)

        if isinstance(outcome, ServeFile):
            if outcome.media_type is None:
                return self.responder.file_response(outcome.path, outcome.stat_result, request.scope)
            return FileResponse(outcome.path, stat_result=outcome.stat_result, media_type=outcome.media_type)

        if isinstance(outcome, ListingView):
            return self.render(request, outcome)

        raise TypeError(f"Unknown routing outcome: {outcome!r}")

    def render(self, request: Request, view: ListingView) -> Response:
        try:
            return self.templates.TemplateResponse(
                request,
                "index.html",
                {"view": view},
                media_type=HTML_MEDIA_TYPE,
            )
        except Exception as e:
            logger.error(f"Trouble rendering listing for {view.current_label}: {e}")
            raise HTTPException(status_code=500, detail=f"Trouble rendering listing: {str(e)}")

    async def __call__(self, request: Request) -> Response:
        request_path = request.scope["path"]
        try:
            outcome = await run_in_threadpool(self.resolve, request_path)
            return await self.dispatch(request, outcome)
        except (OSError, ValueError) as e:
            # ValueError covers paths the OS rejects outright, such as embedded NUL bytes
            logger.error(f"Error resolving {request_path}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
