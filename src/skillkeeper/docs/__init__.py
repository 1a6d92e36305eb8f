"""
Generated skill documentation.

- catalog: skill entries grouped by kind
- reference: docs/skills/REFERENCE.md
- claude_md: the skills table between markers in CLAUDE.md
- sync: refresh both, or check them without writing
- lint: CLAUDE.md structure rules
"""

from skillkeeper.docs.catalog import (
    NoSkillsFoundError,
    SkillEntry,
    group_by_kind,
    load_catalog,
)
from skillkeeper.docs.claude_md import (
    MarkerNotFoundError,
    render_table,
    replace_table,
    update_claude_md,
)
from skillkeeper.docs.lint import lint_claude_md, lint_text
from skillkeeper.docs.reference import generate_reference, render_reference
from skillkeeper.docs.sync import check_docs, refresh_docs

__all__ = [
    "MarkerNotFoundError",
    "NoSkillsFoundError",
    "SkillEntry",
    "check_docs",
    "generate_reference",
    "group_by_kind",
    "lint_claude_md",
    "lint_text",
    "load_catalog",
    "refresh_docs",
    "render_reference",
    "render_table",
    "replace_table",
    "update_claude_md",
]
