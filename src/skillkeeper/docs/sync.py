"""
Refresh and sync check for the generated skill documents.

`refresh` rewrites REFERENCE.md and the CLAUDE.md skills table. `check`
renders both in memory and compares them with what is on disk; it never
modifies a file, so it is safe to run in CI.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib

import skillkeeper.audit.report as report_module
import skillkeeper.config.types as types
import skillkeeper.console as console
import skillkeeper.constants as constants
import skillkeeper.docs.catalog as catalog
import skillkeeper.docs.claude_md as claude_md_module
import skillkeeper.docs.reference as reference_module

_logger = _logging.getLogger(__name__)


def refresh_docs(
    skills_dir: _pathlib.Path,
    reference_path: _pathlib.Path,
    claude_md: _pathlib.Path,
    config: types.DocsConfig | None = None,
    *,
    skills_dir_label: str = constants.DEFAULT_SKILLS_DIR,
) -> int:
    """
    Regenerate REFERENCE.md and the CLAUDE.md skills table.

    Returns:
        Number of documented skills.
    """
    count = reference_module.generate_reference(
        skills_dir, reference_path, config, skills_dir_label=skills_dir_label
    )
    claude_md_module.update_claude_md(skills_dir, claude_md, config)
    return count


def check_docs(
    skills_dir: _pathlib.Path,
    reference_path: _pathlib.Path,
    claude_md: _pathlib.Path,
    config: types.DocsConfig | None = None,
    *,
    skills_dir_label: str = constants.DEFAULT_SKILLS_DIR,
) -> report_module.AuditReport:
    """
    Compare the generated documents on disk with a fresh rendering.

    Returns:
        A report with one error per out-of-sync document; `checked` is the
        number of documents compared (always 2).

    Raises:
        SkillsDirectoryNotFoundError: If the skills directory is missing.
        NoSkillsFoundError: If there are no skills to document.
    """
    config = config or types.DocsConfig()
    fix_hint = f"run `{config.regenerate_command}` to update"
    report = report_module.AuditReport(checked=2)
    entries = catalog.load_catalog(skills_dir)

    # Reference document
    reference_name = reference_path.name
    if not reference_path.is_file():
        report.error(reference_name, f"does not exist at {reference_path} ({fix_hint})")
    else:
        expected = reference_module.render_reference(
            entries, config, skills_dir_label=skills_dir_label
        )
        if reference_path.read_text(encoding="utf-8") != expected:
            report.error(reference_name, f"is out of sync ({fix_hint})")
        else:
            console.success(_logger, "%s is in sync", reference_name)

    # CLAUDE.md skills table
    claude_name = claude_md.name
    if not claude_md.is_file():
        report.error(claude_name, f"does not exist at {claude_md}")
        return report

    content = claude_md.read_text(encoding="utf-8")
    try:
        current = claude_md_module.extract_table_section(content, path=claude_md)
    except claude_md_module.MarkerNotFoundError as e:
        report.error(claude_name, str(e))
        return report

    table = claude_md_module.render_table(entries, config)
    expected_section = claude_md_module.extract_table_section(
        claude_md_module.replace_table(content, table)
    )
    if current != expected_section:
        report.error(claude_name, f"skills table is out of sync ({fix_hint})")
    else:
        console.success(_logger, "%s skills table is in sync", claude_name)

    return report
