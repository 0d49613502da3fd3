"""
Directory listing data model and the directory reader that builds it.
"""
import os
import posixpath
from dataclasses import dataclass, field
from typing import List, Union

from .results import Delegate, NotFound
from .urlpath import dir_url, join_url, url_segments

INDEX_FILE = "index.html"

FILE = "file"
DIRECTORY = "directory"


@dataclass
class Entry:
    """One item in a listing or breadcrumb trail."""
    name: str
    url_path: str  # absolute, prefix included, trailing "/" iff directory
    kind: str = FILE

    @property
    def is_dir(self) -> bool:
        return self.kind == DIRECTORY


@dataclass
class ListingView:
    """Everything the listing template needs for one directory."""
    current_label: str
    parents: List[Entry] = field(default_factory=list)
    entries: List[Entry] = field(default_factory=list)


def sort_entries(entries: List[Entry]) -> List[Entry]:
    """Directories first, then files, each group ordered by name."""
    return sorted(entries, key=lambda entry: (not entry.is_dir, entry.name))


def build_parents(url_path: str, prefix: str, root_label: str) -> List[Entry]:
    """
    Breadcrumb entries from the mount root down to the current directory.

    The root segment is labeled with root_label instead of the empty string.
    """
    parts = url_path.split("/")[:-1]
    parents = []
    for i, part in enumerate(parts):
        parents.append(Entry(
            name=part or root_label,
            url_path=dir_url(prefix, "/".join(parts[:i + 1])),
            kind=DIRECTORY,
        ))
    return parents


def list_directory(
    root: str,
    url_path: str,
    prefix: str,
    root_label: str,
    include_dotfiles: bool = False,
    explicit_index: bool = False,
) -> Union[ListingView, NotFound, Delegate]:
    """
    Read the directory at url_path under root and build its listing.

    Returns Delegate when the directory holds an index.html file and
    explicit_index is off, NotFound when the directory does not exist.
    Any other OSError is raised to the caller.
    """
    physical_dir = os.path.join(root, *url_segments(url_path))

    try:
        with os.scandir(physical_dir) as it:
            children = list(it)
    except FileNotFoundError:
        return NotFound(f"{url_path} does not exist")

    entries = []
    for child in children:
        name = child.name
        if not include_dotfiles and name.startswith("."):
            continue

        if child.is_dir():
            entries.append(Entry(name=name, url_path=dir_url(prefix, url_path, name), kind=DIRECTORY))
            continue

        if name == INDEX_FILE and not explicit_index:
            # the implicit index wins over browsing
            return Delegate(url_path)

        entries.append(Entry(name=name, url_path=join_url(prefix, url_path, name), kind=FILE))

    entries = sort_entries(entries)

    if url_path != "/":
        entries.insert(0, Entry(name="..", url_path=dir_url(prefix, url_path, ".."), kind=DIRECTORY))

    return ListingView(
        current_label=posixpath.join(root_label, url_path.strip("/")).rstrip("/") or root_label,
        parents=build_parents(url_path, prefix, root_label),
        entries=entries,
    )
