"""Static file server with directory listings."""

from .config import ServeConfig
from .dotfiles import DotFileMiddleware
from .files import FileResponder
from .listing import Entry, ListingView, list_directory
from .router import IndexRouter
from .urlpath import InvalidPrefix, normalize_prefix

__version__ = "0.1.0"

__all__ = [
    'ServeConfig',
    'DotFileMiddleware',
    'FileResponder',
    'Entry',
    'ListingView',
    'list_directory',
    'IndexRouter',
    'InvalidPrefix',
    'normalize_prefix',
]
