"""
Semantic skill auditor.

Goes beyond the structure check to enforce the multi-YAML pattern based on
each skill's kind:

  A) skill.yaml exists, names the skill and declares a valid kind
  B) required files are present for the kind
  C) non-helpers define a Stop hook that calls the validate command
  D) every collaboration reference resolves to a skill
  E) non-helpers keep pattern lists out of SKILL.md (warning)
  G) frontmatter name: length, characters, reserved words
  H) frontmatter description: non-empty, length
  I) SKILL.md stays short (warning)
  K) gate/scaffolder/meta carry a procedure section (warning)
  F) every skill is mentioned in CLAUDE.md

A failure of A (other than a name mismatch) skips the remaining checks for
that skill, because they all depend on knowing its kind.
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


class SkillAuditor:
    """
    Audits every skill in a skills directory.

    Example:
        auditor = SkillAuditor(settings.skills_dir, settings.audit,
                               claude_md=settings.claude_md_path)
        report = auditor.run(strict=True)
    """

    def __init__(
        self,
        skills_dir: _pathlib.Path,
        config: types.AuditConfig | None = None,
        *,
        claude_md: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the auditor.

        Args:
            skills_dir: Directory holding one folder per skill.
            config: Audit rules (defaults when omitted).
            claude_md: CLAUDE.md to check for skill mentions; the check is
                skipped when None or when the file does not exist.
        """
        self._discovery = discovery.SkillDiscovery(skills_dir)
        self._config = config or types.AuditConfig()
        self._claude_md = claude_md

    def collect(
        self,
        report: report_module.AuditReport,
        *,
        strict: bool = False,
    ) -> list[skill_module.Skill]:
        """
        Select the skills to audit.

        Directories outside the configured prefix are reported and skipped;
        directories without SKILL.md are ignored.

        Raises:
            SkillsDirectoryNotFoundError: If the skills directory is missing.
        """
        prefix = self._config.skill_prefix
        skills: list[skill_module.Skill] = []
        for skill_dir in self._discovery.iter_directories():
            name = skill_dir.name
            if prefix and not name.startswith(prefix):
                if strict:
                    report.error(
                        name, f"Directory does not start with '{prefix}' prefix (required)"
                    )
                else:
                    report.warning(
                        name,
                        f"Directory does not start with '{prefix}' prefix "
                        "(should be renamed or removed)",
                    )
                continue
            if not (skill_dir / constants.SKILL_MD).is_file():
                _logger.debug("Skipping %s: no %s", name, constants.SKILL_MD)
                continue
            skills.append(skill_module.Skill(path=skill_dir))
        return skills

    def run(self, *, strict: bool = False) -> report_module.AuditReport:
        """
        Audit all skills.

        Args:
            strict: Report prefix violations as errors; the caller also
                uses it to fail on warnings.

        Returns:
            The report, with `checked` set to the number of audited skills.

        Raises:
            SkillsDirectoryNotFoundError: If the skills directory is missing.
        """
        report = report_module.AuditReport()
        skills = self.collect(report, strict=strict)
        known = {skill.name for skill in skills}

        for skill in skills:
            _logger.debug("Auditing %s", skill.name)
            self.audit_skill(skill, known, report)

        self.check_documented(skills, report)
        report.checked = len(skills)
        return report

    # =========================================================================
    # Per-skill checks
    # =========================================================================

    def audit_skill(
        self,
        skill: skill_module.Skill,
        known: set[str],
        report: report_module.AuditReport,
    ) -> None:
        """Run checks A through K against one skill."""
        spec = self.check_kind(skill, report)
        if spec is None:
            return
        kind = spec.kind

        self.check_required_files(skill, kind, report)

        try:
            frontmatter = skill.load_frontmatter()
        except documents.SkillFileError as e:
            report.error(skill.name, e.message)
            frontmatter = None

        if frontmatter is not None and kind != constants.HELPER_KIND:
            self.check_stop_hook(skill, kind, frontmatter, report)

        self.check_references(skill, known, report)

        if kind != constants.HELPER_KIND:
            self.check_pattern_lists(skill, report)

        if frontmatter is not None:
            for problem in rules.name_problems(frontmatter.name, self._config):
                report.error(skill.name, problem)
            for problem in rules.description_problems(frontmatter.description, self._config):
                report.error(skill.name, problem)

        self.check_conciseness(skill, report)

        if kind in constants.PROCEDURE_KINDS and not spec.has_procedure:
            report.warning(
                skill.name,
                f"kind '{kind}' should have a procedure section in skill.yaml "
                "(workflow checklist best practice)",
            )

    def check_kind(
        self,
        skill: skill_module.Skill,
        report: report_module.AuditReport,
    ) -> documents.SkillSpec | None:
        """
        Check A: skill.yaml exists, names the skill and declares a valid kind.

        Returns:
            The parsed skill.yaml when the remaining checks can run.
        """
        if not skill.has_file(constants.SKILL_YAML):
            report.error(skill.name, "Missing skill.yaml (required for all skills)")
            return None

        try:
            spec = skill.load_spec()
        except documents.SkillFileError as e:
            _logger.debug("%s", e)
            spec = None

        if spec is None or not spec.name:
            report.error(skill.name, "skill.yaml failed to parse or missing name")
            return None

        if spec.name != skill.name:
            report.error(
                skill.name,
                f"skill.yaml name '{spec.name}' must match folder name '{skill.name}'",
            )

        if not spec.kind:
            report.error(skill.name, "skill.yaml missing 'kind' field")
            return None

        valid_kinds = self._config.valid_kinds
        if spec.kind not in valid_kinds:
            report.error(
                skill.name,
                f"skill.yaml kind '{spec.kind}' not valid "
                f"(must be one of: {' '.join(valid_kinds)})",
            )
            return None

        return spec

    def check_required_files(
        self,
        skill: skill_module.Skill,
        kind: str,
        report: report_module.AuditReport,
    ) -> None:
        """Check B: every file required for the kind is present."""
        for filename in skill.missing_files(rules.required_files(kind)):
            report.error(skill.name, f"Missing {filename} (required for kind '{kind}')")

    def check_stop_hook(
        self,
        skill: skill_module.Skill,
        kind: str,
        frontmatter: skill_module.SkillFrontmatter,
        report: report_module.AuditReport,
    ) -> None:
        """Check C: a Stop hook exists and calls the validate command."""
        commands = frontmatter.stop_hook_commands
        if not commands:
            report.error(skill.name, f"No Stop hook defined (required for kind '{kind}')")
            return

        expected = self._config.expected_stop_hook(skill.name)
        if not rules.calls_command(commands, expected):
            report.error(skill.name, f"Stop hook must call '{expected}'")

    def check_references(
        self,
        skill: skill_module.Skill,
        known: set[str],
        report: report_module.AuditReport,
    ) -> None:
        """Check D: collaboration references resolve to audited skills."""
        try:
            collaboration = skill.load_collaboration()
        except documents.SkillFileError as e:
            report.error(skill.name, f"collaboration.yaml is invalid: {e.message}")
            return
        if collaboration is None:
            return

        for ref in rules.unresolved_references(collaboration, known):
            report.error(
                skill.name, f"collaboration.yaml references non-existent skill '{ref}'"
            )

    def check_pattern_lists(
        self,
        skill: skill_module.Skill,
        report: report_module.AuditReport,
    ) -> None:
        """Check E: SKILL.md stays thin (no pattern lists)."""
        content = skill.read_skill_md()
        if content is not None and rules.has_pattern_list(content):
            report.warning(
                skill.name,
                "SKILL.md contains pattern list (move to skill.yaml, keep SKILL.md thin)",
            )

    def check_conciseness(
        self,
        skill: skill_module.Skill,
        report: report_module.AuditReport,
    ) -> None:
        """Check I: SKILL.md line count."""
        limit = self._config.skill_md_max_lines
        line_count = skill.skill_md_line_count
        if line_count > limit:
            report.warning(
                skill.name,
                f"SKILL.md is {line_count} lines (best practice: <{limit}). "
                "This is a signal, not a correctness issue. "
                "Consider moving details to skill.yaml.",
            )

    # =========================================================================
    # Cross-skill checks
    # =========================================================================

    def check_documented(
        self,
        skills: list[skill_module.Skill],
        report: report_module.AuditReport,
    ) -> None:
        """Check F: every audited skill is mentioned in CLAUDE.md as `name`."""
        if self._claude_md is None or not self._claude_md.is_file():
            return

        content = self._claude_md.read_text(encoding="utf-8")
        for skill in skills:
            if f"`{skill.name}`" not in content:
                report.error(
                    skill.name,
                    "Not documented in CLAUDE.md (add to '### Skill kinds' section)",
                )


def audit_skills(
    skills_dir: _pathlib.Path,
    config: types.AuditConfig | None = None,
    *,
    claude_md: _pathlib.Path | None = None,
    strict: bool = False,
) -> report_module.AuditReport:
    """Convenience wrapper: build a SkillAuditor and run it."""
    return SkillAuditor(skills_dir, config, claude_md=claude_md).run(strict=strict)
