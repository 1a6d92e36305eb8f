"""
Skills reference document (docs/skills/REFERENCE.md).

The document is a pure function of the skill files: the same skills always
render to the same bytes, so the sync check can compare renderings.
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

PATTERN_FILES = (
    (constants.SKILL_MD, "Thin frontmatter + pointers, what the assistant reads first"),
    (constants.SKILL_YAML, "Canonical rules: patterns, procedure, ownership, anti-patterns"),
    (constants.COLLABORATION_YAML, "Dependencies, composition sequences, triggers"),
    (constants.SHARP_EDGES_YAML, "Common pitfalls with detection hints and fixes"),
)


def _header(skills_dir_label: str, regenerate_command: str) -> list[str]:
    return [
        "# Skills Reference",
        "",
        f"> Auto-generated from `{skills_dir_label}/*/skill.yaml` files.",
        f"> Do not edit manually. Run `{regenerate_command}` to regenerate.",
        "",
    ]


def _pattern_section(skills_dir_label: str, kind_order: _typing.Sequence[str]) -> list[str]:
    lines = [
        "## Skill Pattern",
        "",
        f"Each skill is a folder under `{skills_dir_label}/` containing four canonical files:",
        "",
    ]
    lines.extend(
        markdown.format_markdown_table(
            ["File", "Purpose"],
            [[f"`{name}`", purpose] for name, purpose in PATTERN_FILES],
        )
    )
    lines.extend(["", "### Skill Kinds", ""])
    lines.extend(
        markdown.format_markdown_table(
            ["Kind", "Description"],
            [[kind, catalog.kind_description(kind)] for kind in kind_order],
        )
    )
    lines.append("")
    return lines


def _overview(
    groups: list[tuple[str, list[catalog.SkillEntry]]],
    description_max: int,
) -> list[str]:
    rows = [
        [
            f"`{entry.name}`",
            markdown.escape_cell(kind),
            markdown.escape_cell(markdown.truncate(entry.description, description_max)),
            "yes" if entry.user_invocable else "no",
        ]
        for kind, entries in groups
        for entry in entries
    ]
    lines = ["## Overview", ""]
    lines.extend(
        markdown.format_markdown_table(["Skill", "Kind", "Description", "Invocable"], rows)
    )
    lines.append("")
    return lines


def _bullets(title: str, items: _typing.Sequence[str]) -> list[str]:
    if not items:
        return []
    return [f"**{title}:**", *(f"- {item}" for item in items), ""]


def render_skill_detail(entry: catalog.SkillEntry) -> list[str]:
    """Lines for one skill's detail section."""
    lines = [f"### `{entry.name}`", ""]

    meta = [f"**Kind:** {entry.kind}"]
    if entry.version:
        meta.append(f"**Version:** {entry.version}")
    if entry.severity:
        meta.append(f"**Severity:** {entry.severity}")
    if entry.user_invocable:
        meta.append(f"**Invocable:** `/{entry.name}`")
    lines.extend([" | ".join(meta), ""])

    if entry.description:
        lines.extend([entry.description, ""])

    if entry.purpose:
        lines.extend([f"**Purpose:** {' '.join(entry.purpose.split())}", ""])

    when = entry.when
    if when and when != entry.description:
        lines.extend([f"**When to use:** {when}", ""])

    if entry.tags:
        lines.extend([f"**Tags:** {', '.join(entry.tags)}", ""])

    lines.extend(_bullets("Owns", entry.owns))
    lines.extend(_bullets("Anti-patterns", entry.anti_patterns))
    lines.extend(_bullets("Sharp edges", entry.sharp_edges))
    return lines


def render_reference(
    entries: _typing.Iterable[catalog.SkillEntry],
    config: types.DocsConfig | None = None,
    *,
    skills_dir_label: str = constants.DEFAULT_SKILLS_DIR,
) -> str:
    """
    Render the full reference document.

    Args:
        entries: Catalog entries (any order).
        config: Kind order, description width and regenerate command.
        skills_dir_label: Skills directory as shown in the text.

    Returns:
        Markdown text ending with a newline.
    """
    config = config or types.DocsConfig()
    groups = catalog.group_by_kind(entries, config.kind_order)

    lines = _header(skills_dir_label, config.regenerate_command)
    lines.extend(_pattern_section(skills_dir_label, config.kind_order))
    lines.extend(_overview(groups, config.table_description_max))

    lines.extend(["## Skill Details", ""])
    for kind, kind_entries in groups:
        lines.extend(
            [
                "---",
                "",
                f"## {catalog.kind_label(kind)}",
                "",
                f"> {catalog.kind_description(kind)}",
                "",
            ]
        )
        for entry in kind_entries:
            lines.extend(render_skill_detail(entry))

    lines.extend(["---", "", f"*Generated by `{config.regenerate_command}`*"])
    return "\n".join(lines) + "\n"


def generate_reference(
    skills_dir: _pathlib.Path,
    output_path: _pathlib.Path,
    config: types.DocsConfig | None = None,
    *,
    skills_dir_label: str = constants.DEFAULT_SKILLS_DIR,
) -> int:
    """
    Render the reference from the skills directory and write it.

    Returns:
        Number of skills in the document.

    Raises:
        SkillsDirectoryNotFoundError: If the skills directory is missing.
        NoSkillsFoundError: If there are no skills to document.
        SkillFileError: If a skill's YAML is malformed.
    """
    entries = catalog.load_catalog(skills_dir)
    _logger.info("Generating %s", output_path)
    content = render_reference(entries, config, skills_dir_label=skills_dir_label)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    console.success(_logger, "Generated %s (%d skills)", output_path, len(entries))
    return len(entries)
