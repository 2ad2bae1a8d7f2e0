"""Map source URLs to markdown file locations under the content root."""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path, PurePosixPath
from typing import Iterable, NamedTuple
from urllib.parse import urlparse


class ContentPath(NamedTuple):
    """Where the markdown for one URL is written.

    ``relative_path`` always uses POSIX separators and starts with the
    content root as given (e.g. ``content/blog/post-a.md``).
    """

    md_path: Path
    directory: Path
    relative_path: str


def resolve_output_path(url: str, content_root: str | Path = "content") -> ContentPath:
    """Return the output location for *url*.

    Empty and ``/``-terminated paths get ``index`` appended; the remaining
    segments become directories plus a file name with ``.md`` added.  No
    case folding or unicode normalisation is applied.

    >>> resolve_output_path("https://example.com/blog/").relative_path
    'content/blog/index.md'
    >>> resolve_output_path("https://example.com/blog/post-a").relative_path
    'content/blog/post-a.md'
    """
    path = urlparse(url).path or "/"
    if path.endswith("/"):
        path += "index"

    segments = [s for s in path.split("/") if s]
    *dir_parts, filename = segments

    root = Path(content_root)
    directory = root.joinpath(*dir_parts)
    md_path = directory / f"{filename}.md"
    relative = PurePosixPath(root.as_posix(), *dir_parts, f"{filename}.md")
    return ContentPath(md_path=md_path, directory=directory, relative_path=str(relative))


def find_collisions(
    urls: Iterable[str], content_root: str | Path = "content",
) -> dict[str, list[str]]:
    """Return output paths claimed by more than one distinct URL.

    URLs that cannot be parsed claim nothing; they fail later, on import.
    """
    claims: dict[str, list[str]] = defaultdict(list)
    for url in dict.fromkeys(urls):
        try:
            path = resolve_output_path(url, content_root).relative_path
        except ValueError:
            continue
        claims[path].append(url)
    return {path: owners for path, owners in claims.items() if len(owners) > 1}
