"""
Raw per-file responder built on Starlette's StaticFiles.
"""
import logging
import os
import posixpath
import stat

from fastapi import HTTPException
from starlette.concurrency import run_in_threadpool
from starlette.responses import RedirectResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from .listing import INDEX_FILE
from .urlpath import url_segments

logger = logging.getLogger(__name__)


class FileResponder(StaticFiles):
    """
    Serve single files the way a classic file server does.

    On top of StaticFiles this issues the canonical redirects:
    ".../index.html" goes to "./" and a directory without a trailing slash
    gets one. Directories are only answered with their index.html.
    """

    def __init__(self, directory: str):
        super().__init__(directory=directory, follow_symlink=True)

    @staticmethod
    def redirect(location: str, scope: Scope) -> Response:
        """Relative 301 redirect that keeps the query string."""
        query = scope.get("query_string", b"").decode("latin-1")
        if query:
            location = f"{location}?{query}"
        return RedirectResponse(location, status_code=301)

    async def lookup(self, relative: str):
        try:
            return await run_in_threadpool(self.lookup_path, relative)
        except PermissionError as e:
            logger.warning(f"Permission denied looking up {relative}: {e}")
            raise HTTPException(status_code=403, detail="Forbidden")

    async def respond(self, url_path: str, scope: Scope) -> Response:
        """Answer a request for url_path, which is relative to the mount prefix."""
        if url_path.endswith("/" + INDEX_FILE):
            return self.redirect("./", scope)

        segments = url_segments(url_path)
        relative = os.path.join(*segments) if segments else "."

        full_path, stat_result = await self.lookup(relative)
        if stat_result is None:
            raise HTTPException(status_code=404, detail="Not Found")

        if stat.S_ISDIR(stat_result.st_mode):
            if not url_path.endswith("/"):
                return self.redirect(posixpath.basename(url_path) + "/", scope)

            index_path, index_stat = await self.lookup(os.path.join(relative, INDEX_FILE))
            if index_stat is None or not stat.S_ISREG(index_stat.st_mode):
                raise HTTPException(status_code=404, detail="Not Found")
            return self.file_response(index_path, index_stat, scope)

        return self.file_response(full_path, stat_result, scope)
