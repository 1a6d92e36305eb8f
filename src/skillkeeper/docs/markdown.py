"""Markdown helpers for generated skill documentation."""

from __future__ import annotations

ELLIPSIS = "..."


def split_lines(content: str) -> list[str]:
    """
    Split text into lines on line feeds only.

    Form feeds, U+2028 and other characters `str.splitlines` treats as
    breaks stay inside their line, and a trailing newline does not produce
    an empty last line.
    """
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def escape_cell(text: str) -> str:
    """Escape characters that would break a markdown table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


def truncate(text: str, max_length: int) -> str:
    """
    Shorten text for a table cell.

    Text longer than `max_length` is cut so that, with the trailing
    ellipsis, it is exactly `max_length` characters long.
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def format_markdown_table(
    headers: list[str],
    rows: list[list[str]],
) -> list[str]:
    """
    Format a markdown table as lines.

    Cells are written as given (callers escape them); the separator row
    uses len(header) + 2 dashes per column so the output does not shift
    when row contents change.

    Args:
        headers: Column header strings.
        rows: List of rows, each row is a list of cell values.

    Returns:
        Table lines without trailing newlines.

    Example:
        >>> format_markdown_table(["Skill", "Kind"], [["`a`", "gate"]])
        ['| Skill | Kind |', '|-------|------|', '| `a` | gate |']
    """
    num_cols = len(headers)
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in headers) + "|",
    ]
    for row in rows:
        cells = [row[i] if i < len(row) else "" for i in range(num_cols)]
        lines.append("| " + " | ".join(cells) + " |")
    return lines
