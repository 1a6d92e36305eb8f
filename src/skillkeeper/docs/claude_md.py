"""
Skills table inside CLAUDE.md.

The table lives between two marker lines:

    <!-- SKILLS_TABLE_START -->
    ...generated...
    <!-- SKILLS_TABLE_END -->

Everything outside the markers is left untouched; everything between
them is replaced, so running the update twice gives identical files.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import skillkeeper.config.types as types
import skillkeeper.console as console
import skillkeeper.constants as constants
import skillkeeper.docs.catalog as catalog
import skillkeeper.docs.markdown as markdown

_logger = _logging.getLogger(__name__)


class MarkerNotFoundError(ValueError):
    """A skills table marker is missing from CLAUDE.md (or out of order)."""

    def __init__(self, path: _pathlib.Path | None, marker: str, detail: str = "not found") -> None:
        self.path = path
        self.marker = marker
        where = f" in {path}" if path is not None else ""
        super().__init__(f"Marker {marker} {detail}{where}")


def render_table(
    entries: _typing.Iterable[catalog.SkillEntry],
    config: types.DocsConfig | None = None,
) -> list[str]:
    """
    Render the CLAUDE.md skills table.

    Invocable skills are shown with their slash command, e.g.
    `` `commit` (`/commit`) ``.
    """
    config = config or types.DocsConfig()
    rows: list[list[str]] = []
    for kind, kind_entries in catalog.group_by_kind(entries, config.kind_order):
        for entry in kind_entries:
            name = f"`{entry.name}`"
            if entry.user_invocable:
                name = f"{name} (`/{entry.name}`)"
            description = markdown.truncate(entry.description, config.table_description_max)
            rows.append(
                [name, markdown.escape_cell(kind), markdown.escape_cell(description)]
            )
    return markdown.format_markdown_table(["Skill", "Kind", "Description"], rows)


def _marker_indices(lines: list[str], path: _pathlib.Path | None) -> tuple[int, int]:
    stripped = [line.strip() for line in lines]
    try:
        start = stripped.index(constants.TABLE_START_MARKER)
    except ValueError:
        raise MarkerNotFoundError(path, constants.TABLE_START_MARKER) from None
    try:
        end = stripped.index(constants.TABLE_END_MARKER, start + 1)
    except ValueError:
        detail = "not found"
        if constants.TABLE_END_MARKER in stripped:
            detail = "not found after start marker"
        raise MarkerNotFoundError(path, constants.TABLE_END_MARKER, detail) from None
    return start, end


def replace_table(
    content: str,
    table_lines: list[str],
    *,
    path: _pathlib.Path | None = None,
) -> str:
    """
    Replace the text between the markers with the table.

    The start marker line is followed by a blank line, the table and a
    blank line; the end marker line follows.

    Raises:
        MarkerNotFoundError: If either marker line is missing.
    """
    lines = markdown.split_lines(content)
    start, end = _marker_indices(lines, path)
    new_lines = [*lines[: start + 1], "", *table_lines, "", *lines[end:]]
    return "\n".join(new_lines) + "\n"


def extract_table_section(content: str, *, path: _pathlib.Path | None = None) -> str:
    """
    Text from the start marker line through the end marker line.

    Raises:
        MarkerNotFoundError: If either marker line is missing.
    """
    lines = markdown.split_lines(content)
    start, end = _marker_indices(lines, path)
    return "\n".join(lines[start : end + 1])


def update_claude_md(
    skills_dir: _pathlib.Path,
    claude_md: _pathlib.Path,
    config: types.DocsConfig | None = None,
) -> int:
    """
    Regenerate the skills table in CLAUDE.md.

    Returns:
        Number of skills in the table.

    Raises:
        FileNotFoundError: If CLAUDE.md does not exist.
        MarkerNotFoundError: If a marker line is missing.
        SkillsDirectoryNotFoundError: If the skills directory is missing.
        NoSkillsFoundError: If there are no skills to list.
    """
    if not claude_md.is_file():
        raise FileNotFoundError(f"CLAUDE.md not found at {claude_md}")

    # newline="" keeps CRLF and lone CR outside the markers as written
    with claude_md.open(encoding="utf-8", newline="") as f:
        content = f.read()
    # Fail on missing markers before touching the skills
    _marker_indices(markdown.split_lines(content), claude_md)

    entries = catalog.load_catalog(skills_dir)
    _logger.info("Updating skills table in %s", claude_md)
    updated = replace_table(content, render_table(entries, config), path=claude_md)

    if updated != content:
        claude_md.write_text(updated, encoding="utf-8", newline="")
        console.success(_logger, "Updated CLAUDE.md skills table (%d skills)", len(entries))
    else:
        console.success(
            _logger, "CLAUDE.md skills table already up to date (%d skills)", len(entries)
        )
    return len(entries)
