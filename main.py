"""
Static file server with directory listings.

Run:  dirserve [options] DIR
"""
import argparse
import logging
import sys
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from dirserve import __version__
from dirserve.config import DEFAULT_PORT, ServeConfig
from dirserve.dotfiles import DotFileMiddleware
from dirserve.router import IndexRouter


def create_app(config: ServeConfig) -> FastAPI:
    """Build the app serving config.directory under config.prefix."""
    app = FastAPI(
        title="dirserve",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    router = IndexRouter(config)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Plain text error pages instead of JSON."""
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def serve(request: Request):
        return await router(request)

    # Last added runs first: CORS, then the dot filter, then the router
    if not config.dot:
        app.add_middleware(DotFileMiddleware)

    if config.cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "HEAD"],
            allow_headers=["Origin", "Accept", "Content-Type", "X-Requested-With"],
        )

    return app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dirserve",
        description="Serve files from a directory, with directory listings.",
    )
    parser.add_argument("dir",
                        help="Serve files from this directory")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT,
                        help=f"Listen on this port (default: {DEFAULT_PORT})")
    parser.add_argument("--prefix", default="/",
                        help="Prefix all URL paths with this value (default: /)")
    parser.add_argument("--cors", action=argparse.BooleanOptionalAction, default=True,
                        help="Include CORS support (on by default)")
    parser.add_argument("--dot", action="store_true",
                        help="Serve dot files (files prefixed with a '.')")
    parser.add_argument("--explicit-index", action="store_true",
                        help="Only serve index.html files if URL path includes it")
    parser.add_argument("--spa", action="store_true",
                        help="Serve the index.html file for all unknown paths")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}",
                        help="Print the version and exit")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> ServeConfig:
    """Validate CLI arguments into a ServeConfig; exits with a usage error if invalid."""
    try:
        return ServeConfig(
            directory=args.dir,
            port=args.port,
            prefix=args.prefix,
            cors=args.cors,
            dot=args.dot,
            explicit_index=args.explicit_index,
            spa=args.spa,
        )
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            print(f"dirserve: error: {field}: {error['msg']}", file=sys.stderr)
        sys.exit(2)


def main(argv: Optional[List[str]] = None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = load_config(parse_args(argv))
    app = create_app(config)

    print(f"Serving {config.directory} on {config.base_url}{config.prefix}")
    uvicorn.run(app, host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
