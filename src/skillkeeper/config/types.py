"""Configuration type definitions for Skillkeeper settings.

This module defines the Pydantic models used to represent configuration
sections nested within the main Settings class:

- PathsConfig: where skills, CLAUDE.md and the reference document live
- AuditConfig: kinds, prefixes, limits and the Stop hook command
- DocsConfig: generated documentation and CLAUDE.md lint settings
- LoggingConfig: console logging

Design decision: All types use `extra="allow"` to preserve unknown fields,
so `config --json` can show typos and outdated keys.
"""

import typing as _typing

import pydantic as _pydantic

import skillkeeper.constants as constants

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are preserved rather than silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Collect extra fields with dotted paths as keys.

        Args:
            prefix: Dotted path prefix for the returned keys.

        Returns:
            Flat dict of path -> value for all unrecognized fields.
        """
        return {
            f"{prefix}.{key}" if prefix else key: value
            for key, value in self.get_extra_fields().items()
        }


# =============================================================================
# Sections
# =============================================================================


class PathsConfig(ConfigBase):
    """Project-relative locations of the files Skillkeeper reads and writes."""

    skills_dir: str = constants.DEFAULT_SKILLS_DIR
    """Directory holding one folder per skill."""

    claude_md: str = constants.DEFAULT_CLAUDE_MD
    """Project documentation file carrying the skills table."""

    reference: str = constants.DEFAULT_REFERENCE
    """Generated skills reference document."""


class AuditConfig(ConfigBase):
    """Rules enforced by `skillkeeper audit` and `skillkeeper check`."""

    valid_kinds: list[str] = _pydantic.Field(
        default_factory=lambda: list(constants.DEFAULT_VALID_KINDS)
    )
    """Kinds a skill.yaml may declare."""

    skill_prefix: str = ""
    """Required directory-name prefix (empty disables the check)."""

    name_max_length: int = _pydantic.Field(default=constants.DEFAULT_NAME_MAX_LENGTH, ge=1)
    description_max_length: int = _pydantic.Field(
        default=constants.DEFAULT_DESCRIPTION_MAX_LENGTH, ge=1
    )
    skill_md_max_lines: int = _pydantic.Field(
        default=constants.DEFAULT_SKILL_MD_MAX_LINES, ge=1
    )

    reserved_names: list[str] = _pydantic.Field(
        default_factory=lambda: list(constants.DEFAULT_RESERVED_NAMES)
    )
    """Built-in command names a skill may not use."""

    stop_hook_command: str = constants.DEFAULT_STOP_HOOK_COMMAND
    """Command a Stop hook must call; `{skill}` is replaced by the directory name."""

    def expected_stop_hook(self, skill_name: str) -> str:
        """Render the Stop hook command for a skill."""
        return self.stop_hook_command.replace("{skill}", skill_name)


class DocsConfig(ConfigBase):
    """Generated documentation and CLAUDE.md lint settings."""

    kind_order: list[str] = _pydantic.Field(
        default_factory=lambda: list(constants.DEFAULT_KIND_ORDER)
    )
    """Display order of kinds; unlisted kinds follow, sorted."""

    table_description_max: int = _pydantic.Field(
        default=constants.DEFAULT_TABLE_DESCRIPTION_MAX, ge=4
    )
    regenerate_command: str = constants.DEFAULT_REGENERATE_COMMAND
    """Command named in generated files as the way to refresh them."""

    claude_md_max_lines: int = _pydantic.Field(
        default=constants.DEFAULT_CLAUDE_MD_MAX_LINES, ge=1
    )
    built_with_scan_lines: int = _pydantic.Field(
        default=constants.DEFAULT_BUILT_WITH_SCAN_LINES, ge=1
    )
    banned_headings: list[str] = _pydantic.Field(
        default_factory=lambda: list(constants.DEFAULT_BANNED_HEADINGS)
    )


class LoggingConfig(ConfigBase):
    """Console logging settings."""

    debug: bool = False
    """Enable DEBUG level output."""

    show_timestamp: bool = True
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
