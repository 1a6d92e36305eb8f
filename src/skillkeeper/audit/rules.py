"""
Rule predicates shared by the auditor and the structure check.

Each function inspects already-parsed data and returns the problems it
finds as plain messages; callers attach the subject and severity.
"""

from __future__ import annotations

import re as _re
import typing as _typing

import skillkeeper.config.types as types
import skillkeeper.constants as constants
import skillkeeper.skills.documents as documents

_NAME_RE = _re.compile(constants.NAME_PATTERN)

_PATTERN_HEADING_RES = (
    _re.compile(r"##\s*Patterns\s*Enforced", _re.IGNORECASE),
    _re.compile(r"##\s*Anti-?patterns", _re.IGNORECASE),
)


def required_files(kind: str) -> tuple[str, ...]:
    """
    Files a skill of the given kind must ship.

    gate/scaffolder/meta/frontend need all four canonical files, helpers may
    skip sharp-edges.yaml, and any other kind only needs SKILL.md and
    skill.yaml.
    """
    if kind in constants.FULL_KIT_KINDS:
        return (
            constants.SKILL_MD,
            constants.SKILL_YAML,
            constants.COLLABORATION_YAML,
            constants.SHARP_EDGES_YAML,
        )
    if kind == constants.HELPER_KIND:
        return (constants.SKILL_MD, constants.SKILL_YAML, constants.COLLABORATION_YAML)
    return (constants.SKILL_MD, constants.SKILL_YAML)


def unresolved_references(
    collaboration: documents.Collaboration,
    known: _typing.Collection[str],
) -> list[str]:
    """Referenced skill names that are not in `known`, in reference order."""
    return [ref for ref in collaboration.references() if ref not in known]


def calls_command(commands: _typing.Sequence[str], expected: str) -> bool:
    """Whether any of the hook commands contains the expected command."""
    return any(expected in command for command in commands)


def name_problems(name: str, config: types.AuditConfig) -> list[str]:
    """
    Problems with a skill's frontmatter name.

    An empty name is left to other checks; any non-empty name must match
    the lowercase pattern, fit the length cap and avoid reserved names.
    """
    problems: list[str] = []
    if len(name) > config.name_max_length:
        problems.append(
            f"name '{name}' exceeds max length ({len(name)} > {config.name_max_length})"
        )
    if name and not _NAME_RE.fullmatch(name):
        problems.append(
            f"name '{name}' contains invalid characters "
            "(use lowercase, hyphens, underscores only)"
        )
    if name in config.reserved_names:
        problems.append(f"name '{name}' is reserved (conflicts with built-in command)")
    return problems


def description_problems(description: str, config: types.AuditConfig) -> list[str]:
    """Problems with a skill's frontmatter description."""
    problems: list[str] = []
    if not description.strip():
        problems.append("description is empty (required by skills guide)")
    if len(description) > config.description_max_length:
        problems.append(
            f"description exceeds max length "
            f"({len(description)} > {config.description_max_length})"
        )
    return problems


def has_pattern_list(content: str) -> bool:
    """Whether SKILL.md content carries a pattern or anti-pattern section."""
    return any(regex.search(content) for regex in _PATTERN_HEADING_RES)
