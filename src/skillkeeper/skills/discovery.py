"""
Skill discovery within the project's skills directory.

Every immediate subdirectory of the skills directory is a candidate. Which
candidates count as skills depends on the caller: the auditor and the
reference generator want directories with SKILL.md or skill.yaml, the
structure check also accepts directories that only carry validations.yaml.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import skillkeeper.constants as constants
import skillkeeper.skills.skill as skill_module


class SkillsDirectoryNotFoundError(FileNotFoundError):
    """The configured skills directory does not exist."""

    def __init__(self, path: _pathlib.Path) -> None:
        self.path = path
        super().__init__(f"No skills directory found at {path}")


class SkillDiscovery:
    """
    Discovers skill directories under a single skills directory.

    Results are sorted by directory name so every report and generated
    document is deterministic.
    """

    def __init__(self, skills_dir: _pathlib.Path) -> None:
        """
        Initialize skill discovery.

        Args:
            skills_dir: Directory holding one folder per skill.
        """
        self._skills_dir = skills_dir

    @property
    def skills_dir(self) -> _pathlib.Path:
        """The directory being scanned."""
        return self._skills_dir

    def iter_directories(self) -> _typing.Iterator[_pathlib.Path]:
        """
        Yield every non-hidden subdirectory, sorted by name.

        Raises:
            SkillsDirectoryNotFoundError: If the skills directory is missing.
        """
        if not self._skills_dir.is_dir():
            raise SkillsDirectoryNotFoundError(self._skills_dir)

        for entry in sorted(self._skills_dir.iterdir(), key=lambda p: p.name):
            if entry.is_dir() and not entry.name.startswith("."):
                yield entry

    def discover(
        self,
        markers: _typing.Iterable[str] = (constants.SKILL_MD,),
    ) -> list[skill_module.Skill]:
        """
        Discover skills.

        Args:
            markers: A directory is a skill if it contains at least one
                of these files.

        Returns:
            Skills sorted by directory name.

        Raises:
            SkillsDirectoryNotFoundError: If the skills directory is missing.
        """
        marker_files = tuple(markers)
        return [
            skill_module.Skill(path=skill_dir)
            for skill_dir in self.iter_directories()
            if any((skill_dir / marker).is_file() for marker in marker_files)
        ]
