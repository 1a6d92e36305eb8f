"""
YAML structure check for CI.

Validates that every skill's YAML files are well-formed and that the files
tying SKILL.md to validations.yaml agree with each other. Unlike the
auditor, this check does not look at kinds; it also covers directories
that only carry a validations.yaml.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib

import skillkeeper.audit.report as report_module
import skillkeeper.audit.rules as rules
import skillkeeper.config.types as types
import skillkeeper.constants as constants
import skillkeeper.skills.discovery as discovery
import skillkeeper.skills.documents as documents
import skillkeeper.skills.skill as skill_module

_logger = _logging.getLogger(__name__)

STRUCTURE_MARKERS = (constants.SKILL_MD, constants.VALIDATIONS_YAML)
"""A directory with either file takes part in the structure check."""


class StructureChecker:
    """Checks YAML validity and SKILL.md/validations.yaml consistency."""

    def __init__(
        self,
        skills_dir: _pathlib.Path,
        config: types.AuditConfig | None = None,
    ) -> None:
        self._discovery = discovery.SkillDiscovery(skills_dir)
        self._config = config or types.AuditConfig()

    def run(self) -> report_module.AuditReport:
        """
        Check every skill directory.

        Returns:
            A report holding errors only.

        Raises:
            SkillsDirectoryNotFoundError: If the skills directory is missing.
        """
        report = report_module.AuditReport()
        skills = self._discovery.discover(STRUCTURE_MARKERS)
        known = {skill.name for skill in skills}

        for skill in skills:
            _logger.debug("Checking structure of %s", skill.name)
            self.check_skill(skill, known, report)

        report.checked = len(skills)
        return report

    def check_skill(
        self,
        skill: skill_module.Skill,
        known: set[str],
        report: report_module.AuditReport,
    ) -> None:
        """Run every structure check against one skill."""
        frontmatter = self._frontmatter(skill)

        prefix = self._config.skill_prefix
        if prefix and not skill.name.startswith(prefix):
            report.error(skill.name, f"Directory name must start with '{prefix}'")

        if frontmatter is not None and frontmatter.name and frontmatter.name != skill.name:
            report.error(
                skill.name,
                f"SKILL.md name '{frontmatter.name}' must equal directory name '{skill.name}'",
            )

        if not skill.has_file(constants.SKILL_MD):
            report.error(skill.name, "Missing SKILL.md")

        invalid = self.check_yaml_files(skill, report)

        if skill.has_file(constants.VALIDATIONS_YAML):
            self.check_stop_hook(skill, frontmatter, report)
            if constants.VALIDATIONS_YAML not in invalid:
                self.check_validations(skill, report)

        if constants.COLLABORATION_YAML not in invalid:
            self.check_references(skill, known, report)

    def check_yaml_files(
        self,
        skill: skill_module.Skill,
        report: report_module.AuditReport,
    ) -> set[str]:
        """
        Check that each present YAML file parses.

        Returns:
            Names of the files that failed.
        """
        invalid: set[str] = set()
        for filename in constants.SKILL_YAML_FILES:
            path = skill.file(filename)
            if not path.is_file():
                continue
            try:
                documents.load_yaml_mapping(path)
            except documents.SkillFileError as e:
                _logger.debug("%s", e)
                report.error(f"{skill.name}/{filename}", "Invalid YAML")
                invalid.add(filename)
        return invalid

    def check_stop_hook(
        self,
        skill: skill_module.Skill,
        frontmatter: skill_module.SkillFrontmatter | None,
        report: report_module.AuditReport,
    ) -> None:
        """A skill with validations.yaml must run them from its Stop hook."""
        if frontmatter is None:
            report.error(
                skill.name,
                "SKILL.md missing or has no frontmatter, but validations.yaml exists",
            )
            return

        commands = frontmatter.stop_hook_commands
        if not commands:
            report.error(skill.name, "validations.yaml exists but SKILL.md has no Stop hook")
            return

        expected = self._config.expected_stop_hook(skill.name)
        if not rules.calls_command(commands, expected):
            report.error(
                skill.name, f"Stop hook must call '{expected}' (validations.yaml exists)"
            )

    def check_validations(
        self,
        skill: skill_module.Skill,
        report: report_module.AuditReport,
    ) -> None:
        """Each validation is a complete command; on_stop ids resolve."""
        try:
            validations = skill.load_validations()
        except documents.SkillFileError as e:
            report.error(f"{skill.name}/{constants.VALIDATIONS_YAML}", e.message)
            return
        if validations is None:
            return

        for index, validation in enumerate(validations.validations):
            if not validation.id:
                report.error(
                    skill.name, f"validations.yaml validations[{index}] missing 'id' field"
                )
                continue
            if validation.type != "command":
                report.error(
                    skill.name,
                    f"validations.yaml validation '{validation.id}' has type "
                    f"'{validation.type}' (only 'command' is supported)",
                )
            if not validation.command:
                report.error(
                    skill.name,
                    f"validations.yaml validation '{validation.id}' missing 'command' field",
                )

        defined = set(validations.ids)
        for validation_id in validations.on_stop:
            if validation_id not in defined:
                report.error(
                    skill.name,
                    "validations.yaml on_stop references non-existent validation "
                    f"'{validation_id}'",
                )

    def check_references(
        self,
        skill: skill_module.Skill,
        known: set[str],
        report: report_module.AuditReport,
    ) -> None:
        """Collaboration references resolve within the checked skill set."""
        try:
            collaboration = skill.load_collaboration()
        except documents.SkillFileError as e:
            report.error(f"{skill.name}/{constants.COLLABORATION_YAML}", e.message)
            return
        if collaboration is None:
            return

        for ref in rules.unresolved_references(collaboration, known):
            report.error(
                skill.name, f"collaboration.yaml references non-existent skill '{ref}'"
            )

    @staticmethod
    def _frontmatter(skill: skill_module.Skill) -> skill_module.SkillFrontmatter | None:
        """Frontmatter, or None when SKILL.md is missing or has no usable frontmatter."""
        try:
            return skill.load_frontmatter()
        except documents.SkillFileError as e:
            _logger.debug("%s", e)
            return None


def check_structure(
    skills_dir: _pathlib.Path,
    config: types.AuditConfig | None = None,
) -> report_module.AuditReport:
    """Convenience wrapper: build a StructureChecker and run it."""
    return StructureChecker(skills_dir, config).run()
