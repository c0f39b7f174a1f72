"""Unified diff parsing: which new-file lines did a change add.

The parser is a line-oriented state machine over file headers, hunk headers
and the three body-line classes (added, removed, context). It never looks at
line content beyond the prefix.

Example:
    diff --git a/app.py b/app.py
    --- a/app.py
    +++ b/app.py
    @@ -10,2 +10,4 @@
     context            <- new line 10
    +added              <- new line 11
    +added              <- new line 12
     context            <- new line 13

yields DiffFileLines(filename="app.py", added_lines=(11, 12)).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from prcoverage.diff.ranges import LineRange, coalesce

log = structlog.get_logger(__name__)

HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

# filename -> canonical added-line ranges
PullRequestFiles = dict[str, list[LineRange]]


@dataclass(frozen=True, slots=True)
class DiffFileLines:
    """Lines a diff adds to one post-change file (new-file numbering)."""

    filename: str
    added_lines: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class _Hunk:
    """Position inside a hunk body."""

    new_cursor: int
    old_remaining: int
    new_remaining: int

    @property
    def open(self) -> bool:
        return self.old_remaining > 0 or self.new_remaining > 0

    def added(self) -> _Hunk:
        return _Hunk(self.new_cursor + 1, self.old_remaining, self.new_remaining - 1)

    def removed(self) -> _Hunk:
        return _Hunk(self.new_cursor, self.old_remaining - 1, self.new_remaining)

    def context(self) -> _Hunk:
        return _Hunk(self.new_cursor + 1, self.old_remaining - 1, self.new_remaining - 1)


@dataclass(frozen=True, slots=True)
class _Section:
    """One file's diff section while it is being scanned."""

    filename: str | None = None
    skipped: bool = False

    def finish(self, added: list[int]) -> DiffFileLines | None:
        if self.filename is None or self.skipped:
            return None
        return DiffFileLines(filename=self.filename, added_lines=tuple(added))


def _unquote(path: str) -> str:
    r"""Decode git's C-style quoted path ("b/caf\303\251.py" -> b/café.py)."""
    try:
        raw = path.encode("utf-8").decode("unicode_escape").encode("latin-1")
        return raw.decode("utf-8")
    except UnicodeError:
        log.debug("diff_path_unquote_failed", path=path[:120])
        return path


def _new_path(header: str) -> str | None:
    """Extract the post-change path from a '+++ ' header, None for deletions."""
    path = header[4:].split("\t", 1)[0].rstrip()
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = _unquote(path[1:-1])
    if path == "/dev/null" or not path:
        return None
    if path.startswith("b/"):
        path = path[2:]
    return path or None


def parse_diff(diff_text: str) -> list[DiffFileLines]:
    """Parse unified diff text into per-file added-line sets.

    Sections without a '+++' header (pure deletions, binary files,
    rename-only entries) and sections with a malformed hunk header are
    skipped rather than raising.
    """
    files: list[DiffFileLines] = []
    section = _Section()
    added: list[int] = []
    hunk: _Hunk | None = None
    saw_git_header = False

    def flush() -> None:
        finished = section.finish(added)
        if finished is not None:
            files.append(finished)

    # Split on "\n" only; form feeds and U+2028 are ordinary line content
    for raw in diff_text.split("\n"):
        line = raw.removesuffix("\r")
        if hunk is not None and hunk.open:
            # Inside a hunk body prefixes are classified by the header counts,
            # so '+++' and '---' here are ordinary added/removed lines.
            if line.startswith("+"):
                added.append(hunk.new_cursor)
                hunk = hunk.added()
                continue
            if line.startswith("-"):
                hunk = hunk.removed()
                continue
            if line.startswith(" ") or line == "":
                hunk = hunk.context()
                continue
            if line.startswith("\\"):
                # "\ No newline at end of file"
                continue
            log.debug("diff_hunk_truncated", filename=section.filename, line=line[:80])
            hunk = None

        if line.startswith("diff --git "):
            flush()
            section, added, hunk = _Section(), [], None
            saw_git_header = True
        elif line.startswith("--- "):
            # Plain unified diffs open a section with '---' instead of 'diff --git'
            if not saw_git_header:
                flush()
                section, added = _Section(), []
            saw_git_header = False
            hunk = None
        elif line.startswith("+++ "):
            saw_git_header = False
            filename = _new_path(line)
            if filename is None:
                log.debug("diff_section_without_new_path", header=line[:120])
            section = _Section(filename, section.skipped)
            hunk = None
        elif line.startswith("@@"):
            match = HUNK_HEADER.match(line)
            if match is None or section.filename is None:
                log.debug("diff_section_skipped", reason="malformed hunk header", header=line[:120])
                section = _Section(section.filename, skipped=True)
                hunk = None
                continue
            old_count = int(match.group(2)) if match.group(2) is not None else 1
            new_start = int(match.group(3))
            new_count = int(match.group(4)) if match.group(4) is not None else 1
            hunk = _Hunk(new_start, old_count, new_count)

    flush()
    return files


def build_pull_request_files(files: Iterable[DiffFileLines]) -> PullRequestFiles:
    """Coalesce each file's added lines into canonical ranges keyed by filename."""
    return {item.filename: coalesce(item.added_lines) for item in files}
