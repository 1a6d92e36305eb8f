"""
Skill catalog for documentation generation.

Collects the fields the generated documents need from every skill that
ships a skill.yaml, and orders them by kind.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import skillkeeper.constants as constants
import skillkeeper.skills.discovery as discovery
import skillkeeper.skills.documents as documents
import skillkeeper.skills.skill as skill_module

_logger = _logging.getLogger(__name__)

UNKNOWN_KIND = "unknown"


class NoSkillsFoundError(ValueError):
    """The skills directory holds no skill with a skill.yaml."""

    def __init__(self, skills_dir: _pathlib.Path) -> None:
        self.skills_dir = skills_dir
        super().__init__(f"No skills found in {skills_dir}")


@_dataclasses.dataclass(frozen=True)
class SkillEntry:
    """Everything the generated documents show about one skill."""

    name: str
    kind: str = UNKNOWN_KIND
    description: str = ""
    """Single-line description (whitespace collapsed)."""

    when_to_use: str = ""
    version: str = ""
    severity: str = ""
    tags: tuple[str, ...] = ()
    purpose: str = ""
    owns: tuple[str, ...] = ()
    anti_patterns: tuple[str, ...] = ()
    """Rendered as `id: description`."""

    sharp_edges: tuple[str, ...] = ()
    """Rendered as `id: description`."""

    user_invocable: bool = False

    @property
    def when(self) -> str:
        """When-to-use text, falling back to the description."""
        return self.when_to_use or self.description

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "kind": self.kind,
            "description": self.description,
            "when_to_use": self.when_to_use,
            "version": self.version,
            "severity": self.severity,
            "tags": list(self.tags),
            "purpose": self.purpose,
            "owns": list(self.owns),
            "anti_patterns": list(self.anti_patterns),
            "sharp_edges": list(self.sharp_edges),
            "user_invocable": self.user_invocable,
        }


def _user_invocable(skill: skill_module.Skill) -> bool:
    try:
        frontmatter = skill.load_frontmatter()
    except documents.SkillFileError as e:
        _logger.warning("Treating %s as not invocable: %s", skill.name, e)
        return False
    return frontmatter.user_invocable if frontmatter is not None else False


def build_entry(skill: skill_module.Skill) -> SkillEntry:
    """
    Build the catalog entry for one skill.

    Raises:
        SkillFileError: If skill.yaml or sharp-edges.yaml is malformed.
    """
    spec = skill.load_spec() or documents.SkillSpec()
    edges = skill.load_sharp_edges()

    return SkillEntry(
        name=skill.name,
        kind=spec.kind.strip() or UNKNOWN_KIND,
        description=documents.collapse_whitespace(spec.description),
        when_to_use=documents.collapse_whitespace(spec.when_to_use),
        version=spec.version.strip(),
        severity=spec.severity.strip(),
        tags=tuple(tag.strip() for tag in spec.tags if tag.strip()),
        purpose=spec.purpose.strip(),
        owns=tuple(
            documents.collapse_whitespace(own) for own in spec.owns if own.strip()
        ),
        anti_patterns=tuple(str(ap) for ap in spec.anti_patterns if str(ap)),
        sharp_edges=tuple(str(edge) for edge in edges.edges if str(edge)) if edges else (),
        user_invocable=_user_invocable(skill),
    )


def load_catalog(skills_dir: _pathlib.Path) -> list[SkillEntry]:
    """
    Load catalog entries for every skill with a skill.yaml.

    Returns:
        Entries sorted by skill name.

    Raises:
        SkillsDirectoryNotFoundError: If the skills directory is missing.
        NoSkillsFoundError: If no skill carries a skill.yaml.
        SkillFileError: If a skill's YAML is malformed.
    """
    skills = discovery.SkillDiscovery(skills_dir).discover((constants.SKILL_YAML,))
    if not skills:
        raise NoSkillsFoundError(skills_dir)

    entries = [build_entry(skill) for skill in skills]
    _logger.debug("Loaded %d skills from %s", len(entries), skills_dir)
    return entries


def group_by_kind(
    entries: _typing.Iterable[SkillEntry],
    kind_order: _typing.Sequence[str] = constants.DEFAULT_KIND_ORDER,
) -> list[tuple[str, list[SkillEntry]]]:
    """
    Group entries by kind in display order.

    Kinds listed in `kind_order` come first, in that order; any other kinds
    follow sorted alphabetically. Kinds without entries are omitted and
    entries within a kind are sorted by name.
    """
    by_kind: dict[str, list[SkillEntry]] = {}
    for entry in entries:
        by_kind.setdefault(entry.kind, []).append(entry)

    ordered = [kind for kind in kind_order if kind in by_kind]
    ordered.extend(sorted(kind for kind in by_kind if kind not in kind_order))
    return [
        (kind, sorted(by_kind[kind], key=lambda e: e.name)) for kind in ordered
    ]


def kind_label(kind: str) -> str:
    """Section heading for a kind."""
    return constants.KIND_LABELS.get(kind, f"Other ({kind})")


def kind_description(kind: str) -> str:
    """One-line description shown under a kind heading."""
    return constants.KIND_DESCRIPTIONS.get(kind, "Uncategorized skills")
