import os

import pytest

from dirserve.listing import DIRECTORY, FILE, Entry, ListingView, build_parents, list_directory, sort_entries
from dirserve.results import Delegate, NotFound


def make_tree(root, files=(), dirs=()):
    for name in dirs:
        os.makedirs(os.path.join(root, name), exist_ok=True)
    for name in files:
        path = os.path.join(root, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(name)


def names(view):
    return [entry.name for entry in view.entries]


def test_directories_sort_before_files(tmp_path):
    make_tree(tmp_path, files=["b.txt", "a.txt", "Z.txt"], dirs=["zdir", "adir"])

    view = list_directory(str(tmp_path), "/", "/", "root")

    assert isinstance(view, ListingView)
    assert names(view) == ["adir", "zdir", "Z.txt", "a.txt", "b.txt"]


def test_sort_entries_is_case_sensitive():
    entries = [Entry("b", "/b"), Entry("B", "/B"), Entry("a", "/a/", DIRECTORY)]
    assert [e.name for e in sort_entries(entries)] == ["a", "B", "b"]


def test_parent_entry_comes_first_below_root(tmp_path):
    make_tree(tmp_path, files=["sub/file.txt"], dirs=["sub/child"])

    view = list_directory(str(tmp_path), "/sub/", "/", "root")

    assert names(view) == ["..", "child", "file.txt"]
    parent = view.entries[0]
    assert parent.kind == DIRECTORY
    assert parent.url_path == "/"


def test_no_parent_entry_at_mount_root(tmp_path):
    make_tree(tmp_path, files=["file.txt"])

    view = list_directory(str(tmp_path), "/", "/mount/", "root")

    assert names(view) == ["file.txt"]


def test_entry_urls_include_prefix(tmp_path):
    make_tree(tmp_path, files=["a/b/file.txt"], dirs=["a/b/c"])

    view = list_directory(str(tmp_path), "/a/b/", "/p/", "root")

    assert [(e.name, e.url_path, e.kind) for e in view.entries] == [
        ("..", "/p/a/", DIRECTORY),
        ("c", "/p/a/b/c/", DIRECTORY),
        ("file.txt", "/p/a/b/file.txt", FILE),
    ]


def test_parents_run_from_root_to_current(tmp_path):
    make_tree(tmp_path, dirs=["a/b"])

    view = list_directory(str(tmp_path), "/a/b/", "/p/", "root")

    assert [(e.name, e.url_path) for e in view.parents] == [
        ("root", "/p/"),
        ("a", "/p/a/"),
        ("b", "/p/a/b/"),
    ]
    assert view.current_label == "root/a/b"


def test_root_listing_label_and_parents():
    parents = build_parents("/", "/", "site")
    assert [(e.name, e.url_path) for e in parents] == [("site", "/")]


def test_dot_files_are_hidden_by_default(tmp_path):
    make_tree(tmp_path, files=[".env", "visible.txt"], dirs=[".git"])

    assert names(list_directory(str(tmp_path), "/", "/", "root")) == ["visible.txt"]
    assert names(list_directory(str(tmp_path), "/", "/", "root", include_dotfiles=True)) == [
        ".git", ".env", "visible.txt",
    ]


def test_index_file_delegates(tmp_path):
    make_tree(tmp_path, files=["a.txt", "index.html", "z.txt"], dirs=["sub"])

    result = list_directory(str(tmp_path), "/", "/", "root")

    assert result == Delegate("/")


def test_explicit_index_lists_index_file(tmp_path):
    make_tree(tmp_path, files=["index.html", "a.txt"])

    view = list_directory(str(tmp_path), "/", "/", "root", explicit_index=True)

    assert names(view) == ["a.txt", "index.html"]


def test_directory_named_index_html_does_not_delegate(tmp_path):
    make_tree(tmp_path, dirs=["index.html"])

    view = list_directory(str(tmp_path), "/", "/", "root")

    assert isinstance(view, ListingView)
    assert [(e.name, e.url_path) for e in view.entries] == [("index.html", "/index.html/")]


def test_hidden_index_file_is_ignored(tmp_path):
    make_tree(tmp_path, files=[".index.html"])

    view = list_directory(str(tmp_path), "/", "/", "root")

    assert isinstance(view, ListingView)
    assert names(view) == []


def test_missing_directory_is_not_found(tmp_path):
    result = list_directory(str(tmp_path), "/missing/", "/", "root")
    assert isinstance(result, NotFound)


def test_other_read_errors_are_raised(tmp_path):
    make_tree(tmp_path, files=["file.txt"])

    with pytest.raises(NotADirectoryError):
        list_directory(str(tmp_path), "/file.txt/", "/", "root")
