"""
Routing outcomes produced by the index router.
"""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NotFound:
    """Nothing to serve for this path."""
    reason: str = "Not Found"


@dataclass(frozen=True)
class Delegate:
    """Hand the request to the raw per-file responder."""
    url_path: str


@dataclass(frozen=True)
class ServeFile:
    """Send one specific file, bypassing the responder's redirects."""
    path: str
    stat_result: os.stat_result
    media_type: Optional[str] = None  # None means infer from the file name
