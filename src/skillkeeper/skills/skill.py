"""
Skill directories and SKILL.md parsing.

A skill is a directory under the skills directory. Its name is the
directory name. SKILL.md carries YAML frontmatter (name, description,
hooks, ...) followed by a thin markdown body that points into the YAML
documents.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import re as _re
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml

import skillkeeper.constants as constants
import skillkeeper.skills.documents as documents

_logger = _logging.getLogger(__name__)

# Regex to extract YAML frontmatter from markdown
_FRONTMATTER_RE = _re.compile(
    r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n(.*))?$",
    _re.DOTALL,
)


class SkillFrontmatter(_pydantic.BaseModel):
    """
    Frontmatter parsed from a SKILL.md file.

    Every field is optional here; the auditor decides which ones are
    required and reports them as findings instead of failing the parse.
    """

    model_config = _pydantic.ConfigDict(extra="allow", populate_by_name=True)

    name: str = _pydantic.Field(
        default="",
        description="Skill name (should match directory name)",
    )

    description: str = _pydantic.Field(
        default="",
        description="What the skill does and when to use it",
    )

    user_invocable: bool = _pydantic.Field(
        default=False,
        alias="user-invocable",
        description="Whether the skill can be run as a slash command",
    )

    allowed_tools: list[str] = _pydantic.Field(
        default_factory=list,
        alias="allowed-tools",
        description="Tools pre-approved for use with this skill",
    )

    hooks: dict[str, _typing.Any] = _pydantic.Field(
        default_factory=dict,
        description="Hook event name -> list of hook entries",
    )

    @_pydantic.model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: _typing.Any) -> _typing.Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @_pydantic.field_validator("name", "description", mode="before")
    @classmethod
    def coerce_text(cls, value: _typing.Any) -> str:
        return documents.as_text(value)

    @_pydantic.field_validator("allowed_tools", mode="before")
    @classmethod
    def split_tools(cls, value: _typing.Any) -> _typing.Any:
        # "Read, Grep, Bash" is as common as a YAML list
        if isinstance(value, str):
            return [tool.strip() for tool in value.split(",") if tool.strip()]
        return value

    def hook_commands(self, event: str) -> list[str]:
        """
        Commands registered for a hook event.

        Both the flat form (`Stop: [{command: ...}]`) and the nested form
        (`Stop: [{hooks: [{command: ...}]}]`) are collected, in file order.
        """
        entries = self.hooks.get(event) or []
        if isinstance(entries, dict):
            entries = [entries]
        if not isinstance(entries, list):
            return []

        commands: list[str] = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            command = entry.get("command")
            if command:
                commands.append(str(command))
            nested = entry.get("hooks") or []
            if isinstance(nested, list):
                for hook in nested:
                    if isinstance(hook, dict) and hook.get("command"):
                        commands.append(str(hook["command"]))
        return commands

    @property
    def stop_hook_commands(self) -> list[str]:
        """Commands run by the Stop hook."""
        return self.hook_commands("Stop")


def parse_frontmatter(content: str) -> tuple[dict[str, _typing.Any] | None, str]:
    """
    Split SKILL.md content into raw frontmatter and body.

    Args:
        content: Raw markdown content.

    Returns:
        Tuple of (frontmatter mapping, body). The mapping is None when the
        file does not start with a `---` delimited block.

    Raises:
        ValueError: If the frontmatter is not valid YAML or not a mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return None, content

    body = (match.group(2) or "").strip()
    try:
        data = _yaml.safe_load(match.group(1))
    except _yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in frontmatter: {e}") from e

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise ValueError(
            f"Frontmatter must be a YAML mapping, got {type(data).__name__}"
        )
    return data, body


def parse_skill_markdown(content: str) -> tuple[SkillFrontmatter, str]:
    """
    Parse a SKILL.md file into frontmatter and body.

    Args:
        content: Raw markdown content.

    Returns:
        Tuple of (frontmatter, body).

    Raises:
        ValueError: If frontmatter is missing or invalid.
    """
    data, body = parse_frontmatter(content)
    if data is None:
        raise ValueError("SKILL.md must have YAML frontmatter (---)")

    try:
        frontmatter = SkillFrontmatter.model_validate(data)
    except _pydantic.ValidationError as e:
        raise ValueError(f"Invalid skill frontmatter: {e}") from e

    return frontmatter, body


_MISSING = object()


@_dataclasses.dataclass
class Skill:
    """
    A skill directory.

    Files are read lazily and cached. A missing file reads as None; a file
    that exists but cannot be parsed raises SkillFileError, so callers can
    tell "absent" from "broken".
    """

    path: _pathlib.Path
    """Path to skill directory."""

    _cache: dict[str, _typing.Any] = _dataclasses.field(
        default_factory=dict, repr=False, compare=False
    )

    @property
    def name(self) -> str:
        """Skill name (the directory name)."""
        return self.path.name

    def file(self, filename: str) -> _pathlib.Path:
        """Path to a file inside the skill directory."""
        return self.path / filename

    def has_file(self, filename: str) -> bool:
        """Whether the skill directory contains the given file."""
        return self.file(filename).is_file()

    def missing_files(self, required: _typing.Iterable[str]) -> list[str]:
        """Return the required file names that do not exist, in order."""
        return [filename for filename in required if not self.has_file(filename)]

    @property
    def skill_md_path(self) -> _pathlib.Path:
        """Path to the SKILL.md file."""
        return self.file(constants.SKILL_MD)

    # =========================================================================
    # SKILL.md
    # =========================================================================

    def read_skill_md(self) -> str | None:
        """Raw SKILL.md content, or None when the file is missing."""
        cached = self._cache.get("skill_md", _MISSING)
        if cached is not _MISSING:
            return _typing.cast(str | None, cached)

        content: str | None = None
        if self.skill_md_path.is_file():
            try:
                content = self.skill_md_path.read_text(encoding="utf-8")
            except OSError as e:
                raise documents.SkillFileError(
                    self.skill_md_path, f"cannot read file: {e}"
                ) from e
        self._cache["skill_md"] = content
        return content

    @property
    def skill_md_line_count(self) -> int:
        """Number of lines in SKILL.md (0 when missing)."""
        content = self.read_skill_md()
        if content is None:
            return 0
        return content.count("\n")

    def load_frontmatter(self) -> SkillFrontmatter | None:
        """
        Parsed SKILL.md frontmatter.

        Returns:
            The frontmatter, or None when SKILL.md does not exist.

        Raises:
            SkillFileError: If SKILL.md has no frontmatter or it is invalid.
        """
        cached = self._cache.get("frontmatter", _MISSING)
        if cached is not _MISSING:
            return _typing.cast(SkillFrontmatter | None, cached)

        content = self.read_skill_md()
        frontmatter: SkillFrontmatter | None = None
        if content is not None:
            try:
                frontmatter, _body = parse_skill_markdown(content)
            except ValueError as e:
                raise documents.SkillFileError(self.skill_md_path, str(e)) from e
        self._cache["frontmatter"] = frontmatter
        return frontmatter

    # =========================================================================
    # YAML documents
    # =========================================================================

    def _load_document(
        self,
        filename: str,
        model: type[documents.DocumentT],
    ) -> documents.DocumentT | None:
        cached = self._cache.get(filename, _MISSING)
        if cached is not _MISSING:
            return _typing.cast("documents.DocumentT | None", cached)

        path = self.file(filename)
        document = documents.load_yaml_document(path, model) if path.is_file() else None
        if document is None:
            _logger.debug("%s: %s not present", self.name, filename)
        self._cache[filename] = document
        return document

    def load_spec(self) -> documents.SkillSpec | None:
        """Parsed skill.yaml, or None when missing."""
        return self._load_document(constants.SKILL_YAML, documents.SkillSpec)

    def load_collaboration(self) -> documents.Collaboration | None:
        """Parsed collaboration.yaml, or None when missing."""
        return self._load_document(constants.COLLABORATION_YAML, documents.Collaboration)

    def load_sharp_edges(self) -> documents.SharpEdges | None:
        """Parsed sharp-edges.yaml, or None when missing."""
        return self._load_document(constants.SHARP_EDGES_YAML, documents.SharpEdges)

    def load_validations(self) -> documents.Validations | None:
        """Parsed validations.yaml, or None when missing."""
        return self._load_document(constants.VALIDATIONS_YAML, documents.Validations)

    def clear_cache(self) -> None:
        """Forget cached file contents (for re-reading after edits)."""
        self._cache.clear()

    def to_dict(self) -> dict[str, _typing.Any]:
        """
        Convert to dictionary for JSON serialization.

        Unparseable files are reported under "errors" instead of raising.
        """
        result: dict[str, _typing.Any] = {
            "name": self.name,
            "path": str(self.path),
            "files": [
                f
                for f in (constants.SKILL_MD, *constants.SKILL_YAML_FILES)
                if self.has_file(f)
            ],
            "skill_md_lines": self.skill_md_line_count,
        }
        errors: list[str] = []

        try:
            frontmatter = self.load_frontmatter()
        except documents.SkillFileError as e:
            errors.append(str(e))
            frontmatter = None
        if frontmatter is not None:
            result["description"] = frontmatter.description
            result["user_invocable"] = frontmatter.user_invocable
            result["allowed_tools"] = frontmatter.allowed_tools
            result["stop_hooks"] = frontmatter.stop_hook_commands

        try:
            spec = self.load_spec()
        except documents.SkillFileError as e:
            errors.append(str(e))
            spec = None
        if spec is not None:
            result["kind"] = spec.kind
            result["version"] = spec.version
            result["tags"] = spec.tags

        try:
            collaboration = self.load_collaboration()
        except documents.SkillFileError as e:
            errors.append(str(e))
            collaboration = None
        if collaboration is not None:
            result["references"] = collaboration.references()

        if errors:
            result["errors"] = errors
        return result
