"""
URL path helpers: mount prefix normalization and path joining.
"""
import posixpath
import re
from typing import List
from urllib.parse import unquote, urlsplit

_SLASHES = re.compile(r"/{2,}")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class InvalidPrefix(ValueError):
    """Raised when a mount prefix cannot form a valid URL path."""


def join_url(*parts: str) -> str:
    """
    Join URL path parts with "/" and clean the result.

    Empty parts are ignored, repeated slashes collapse to one and "." / ".."
    segments are resolved. ".." never climbs above an absolute root.
    """
    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    return posixpath.normpath(_SLASHES.sub("/", joined))


def dir_url(*parts: str) -> str:
    """Like join_url, but the result always ends with a slash."""
    path = join_url(*parts)
    return path if path.endswith("/") else path + "/"


def url_segments(url_path: str) -> List[str]:
    """Split a URL path into its non-empty segments after cleaning it against "/"."""
    return [segment for segment in join_url("/", url_path).split("/") if segment]


def normalize_prefix(base: str, prefix: str) -> str:
    """
    Turn a user supplied mount prefix into an absolute path ending in "/".

    The prefix is joined onto the path of the base URL, so "", "foo",
    "../foo" and "///foo///bar" become "/", "/foo/", "/foo/" and "/foo/bar/".
    Percent-escapes are decoded, matching the decoded request paths.
    """
    try:
        parts = urlsplit(base)
    except ValueError as e:
        raise InvalidPrefix(f"invalid base URL {base!r}: {e}") from e

    if not parts.scheme or not parts.netloc:
        raise InvalidPrefix(f"invalid base URL {base!r}")

    path = dir_url(unquote(parts.path) or "/", unquote(prefix))
    if _CONTROL_CHARS.search(path):
        raise InvalidPrefix(f"invalid control character in prefix {prefix!r}")
    return path
