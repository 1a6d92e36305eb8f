"""
CLAUDE.md lint.

Keeps the project CLAUDE.md short and machine-friendly:
- more than N lines (warning)
- directory tree drawing characters (error, per line)
- no "Built with:" declaration near the top (error)
- missing skills table markers (error, per marker)
- headings that belong in README.md or docs/ (error, per line)
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import re as _re

import skillkeeper.audit.report as report_module
import skillkeeper.config.types as types
import skillkeeper.constants as constants
import skillkeeper.docs.markdown as markdown

_logger = _logging.getLogger(__name__)

BUILT_WITH = "Built with:"


def banned_heading_pattern(headings: list[str]) -> _re.Pattern[str] | None:
    """Regex matching `## <heading>` at the start of a line, or None if no headings."""
    if not headings:
        return None
    alternatives = "|".join(_re.escape(h) for h in headings)
    return _re.compile(rf"^## ({alternatives})")


def lint_text(
    content: str,
    config: types.DocsConfig | None = None,
    *,
    subject: str = constants.DEFAULT_CLAUDE_MD,
) -> report_module.AuditReport:
    """
    Lint CLAUDE.md content.

    Args:
        content: File content.
        config: Limits and banned headings.
        subject: Name used in findings (line findings append `:<line>`).

    Returns:
        Report with `checked` set to 1.
    """
    config = config or types.DocsConfig()
    report = report_module.AuditReport(checked=1)
    lines = markdown.split_lines(content)

    line_count = content.count("\n")
    if line_count > config.claude_md_max_lines:
        report.warning(
            subject,
            f"Line count is {line_count} (target: <={config.claude_md_max_lines}). "
            "Consider moving content to docs/.",
        )
    else:
        _logger.debug("Line count: %d (<=%d)", line_count, config.claude_md_max_lines)

    for number, line in enumerate(lines, start=1):
        if any(char in line for char in constants.TREE_CHARACTERS):
            report.error(
                f"{subject}:{number}",
                f"Directory tree characters found (use dirs-only format instead): {line.strip()}",
            )

    head = lines[: config.built_with_scan_lines]
    if not any(BUILT_WITH in line for line in head):
        report.error(
            subject,
            f'Missing "{BUILT_WITH}" declaration in first {config.built_with_scan_lines} lines',
        )

    for marker in (constants.TABLE_START_MARKER, constants.TABLE_END_MARKER):
        if marker not in content:
            report.error(subject, f"Missing {marker} marker")

    pattern = banned_heading_pattern(config.banned_headings)
    if pattern is not None:
        for number, line in enumerate(lines, start=1):
            if pattern.match(line):
                report.error(
                    f"{subject}:{number}",
                    f"Banned heading found (move to README.md or docs/): {line.strip()}",
                )

    return report


def lint_claude_md(
    path: _pathlib.Path,
    config: types.DocsConfig | None = None,
) -> report_module.AuditReport:
    """
    Lint a CLAUDE.md file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if not path.is_file():
        raise FileNotFoundError(f"CLAUDE.md not found: {path}")
    _logger.debug("Linting: %s", path)
    return lint_text(path.read_text(encoding="utf-8"), config, subject=path.name)


def summary(report: report_module.AuditReport) -> str:
    """One-line lint summary."""
    errors = len(report.errors)
    warnings = len(report.warnings)
    if errors:
        return f"CLAUDE.md lint: {errors} error(s), {warnings} warning(s)"
    if warnings:
        return f"CLAUDE.md lint: 0 errors, {warnings} warning(s)"
    return "CLAUDE.md lint: all checks passed"
