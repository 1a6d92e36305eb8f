"""
Skill registry for looking up skills by name.

The registry wraps discovery with lazy loading so CLI commands like
`skillkeeper show` only scan the skills directory once.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import skillkeeper.constants as constants
import skillkeeper.skills.discovery as discovery
import skillkeeper.skills.skill as skill_module


class SkillRegistry:
    """Registry of the skills in one skills directory."""

    def __init__(
        self,
        skills_dir: _pathlib.Path,
        markers: _typing.Iterable[str] = (constants.SKILL_MD, constants.SKILL_YAML),
    ) -> None:
        """
        Initialize the skill registry.

        Args:
            skills_dir: Directory holding one folder per skill.
            markers: Files that mark a directory as a skill.
        """
        self._discovery = discovery.SkillDiscovery(skills_dir)
        self._markers = tuple(markers)
        self._skills: dict[str, skill_module.Skill] | None = None

    @property
    def skills_dir(self) -> _pathlib.Path:
        """The directory this registry scans."""
        return self._discovery.skills_dir

    def _ensure_discovered(self) -> dict[str, skill_module.Skill]:
        """Ensure skills have been discovered."""
        if self._skills is None:
            self._skills = {
                skill.name: skill for skill in self._discovery.discover(self._markers)
            }
        return self._skills

    def discover(self) -> None:
        """Force re-discovery of skills."""
        self._skills = None
        self._ensure_discovered()

    def list_skills(self) -> list[skill_module.Skill]:
        """List all discovered skills, sorted by name."""
        return list(self._ensure_discovered().values())

    def names(self) -> list[str]:
        """Names of all discovered skills, sorted."""
        return list(self._ensure_discovered())

    def get_skill(self, name: str) -> skill_module.Skill | None:
        """
        Get a skill by name.

        Args:
            name: Skill (directory) name.

        Returns:
            Skill instance or None if not found.
        """
        return self._ensure_discovered().get(name)

    def has_skill(self, name: str) -> bool:
        """Check if a skill exists."""
        return self.get_skill(name) is not None

    def __len__(self) -> int:
        return len(self._ensure_discovered())

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        skills = self.list_skills()
        return {
            "skills_dir": str(self.skills_dir),
            "skill_count": len(skills),
            "skills": [s.to_dict() for s in skills],
        }
