"""
YAML documents that make up a skill.

Each skill directory carries up to four YAML files next to SKILL.md:

- skill.yaml: canonical rules (SkillSpec)
- collaboration.yaml: dependencies, composition and triggers (Collaboration)
- sharp-edges.yaml: common pitfalls (SharpEdges)
- validations.yaml: commands run by `skillkeeper validate` (Validations)

All models keep unknown fields. Authors write these files by hand, so
empty keys (`owns:` with nothing under it) and bare scalars
(`version: 1.0`) are accepted and normalized.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml


class SkillFileError(ValueError):
    """A skill file exists but cannot be read, parsed or validated."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def as_text(value: _typing.Any) -> str:
    """
    Normalize a YAML value to a string.

    None becomes "", lists are joined with newlines, and other scalars
    (numbers, booleans) are converted with str().
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "\n".join(as_text(item) for item in value if item is not None)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_text_list(value: _typing.Any) -> _typing.Any:
    """Normalize a YAML value to a list of strings (a lone string becomes one item)."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [as_text(item) for item in value if item is not None]
    return value


def collapse_whitespace(text: str) -> str:
    """Join multi-line YAML text into a single line with single spaces."""
    return " ".join(text.split())


class DocumentModel(_pydantic.BaseModel):
    """Base for skill documents: unknown keys kept, null values use defaults."""

    model_config = _pydantic.ConfigDict(extra="allow", populate_by_name=True)

    @_pydantic.model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: _typing.Any) -> _typing.Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class _IdDescription(DocumentModel):
    """An `{id, description}` entry; a bare string is taken as the description."""

    id: str = ""
    description: str = ""

    @_pydantic.model_validator(mode="before")
    @classmethod
    def from_string(cls, data: _typing.Any) -> _typing.Any:
        if isinstance(data, str):
            return {"description": data}
        return data

    @_pydantic.field_validator("id", "description", mode="before")
    @classmethod
    def coerce_text(cls, value: _typing.Any) -> str:
        return as_text(value)

    def __str__(self) -> str:
        if self.id:
            return f"{self.id}: {collapse_whitespace(self.description)}"
        return collapse_whitespace(self.description)


# =============================================================================
# skill.yaml
# =============================================================================


class AntiPattern(_IdDescription):
    """A named anti-pattern the skill guards against."""


class SkillSpec(DocumentModel):
    """
    Contents of skill.yaml.

    `name` and `kind` drive the audit; everything else feeds the
    generated reference document.
    """

    name: str = _pydantic.Field(default="", description="Skill name (must match directory)")
    kind: str = _pydantic.Field(default="", description="Skill kind (gate, helper, ...)")
    description: str = ""
    version: str = ""
    severity: str = ""
    tags: list[str] = _pydantic.Field(default_factory=list)
    purpose: str = ""
    when_to_use: str = ""
    owns: list[str] = _pydantic.Field(default_factory=list)
    anti_patterns: list[AntiPattern] = _pydantic.Field(default_factory=list)

    procedure: _typing.Any = None
    analysis_procedure: _typing.Any = None
    scaffolding_procedure: _typing.Any = None

    @_pydantic.field_validator(
        "name",
        "kind",
        "description",
        "version",
        "severity",
        "purpose",
        "when_to_use",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: _typing.Any) -> str:
        return as_text(value)

    @_pydantic.field_validator("tags", "owns", mode="before")
    @classmethod
    def coerce_text_list(cls, value: _typing.Any) -> _typing.Any:
        return as_text_list(value)

    @property
    def has_procedure(self) -> bool:
        """Whether any procedure section is present and non-empty."""
        return any(
            section not in (None, "", [], {})
            for section in (self.procedure, self.analysis_procedure, self.scaffolding_procedure)
        )


# =============================================================================
# collaboration.yaml
# =============================================================================


class Dependency(DocumentModel):
    """A skill this skill depends on."""

    skill: str = ""
    reason: str = ""

    @_pydantic.field_validator("skill", "reason", mode="before")
    @classmethod
    def coerce_text(cls, value: _typing.Any) -> str:
        return as_text(value)


class Composition(DocumentModel):
    """An ordered sequence of skills used together."""

    name: str = ""
    sequence: list[str] = _pydantic.Field(default_factory=list)

    @_pydantic.field_validator("name", mode="before")
    @classmethod
    def coerce_text(cls, value: _typing.Any) -> str:
        return as_text(value)

    @_pydantic.field_validator("sequence", mode="before")
    @classmethod
    def coerce_text_list(cls, value: _typing.Any) -> _typing.Any:
        return as_text_list(value)


class Trigger(DocumentModel):
    """A condition under which another skill should be suggested."""

    suggest: str = ""

    @_pydantic.field_validator("suggest", mode="before")
    @classmethod
    def coerce_text(cls, value: _typing.Any) -> str:
        return as_text(value)


class Collaboration(DocumentModel):
    """Contents of collaboration.yaml."""

    dependencies: list[Dependency] = _pydantic.Field(default_factory=list)
    composition: list[Composition] = _pydantic.Field(default_factory=list)
    triggers: list[Trigger] = _pydantic.Field(default_factory=list)

    def references(self) -> list[str]:
        """
        All skill names this document points at.

        Order: dependencies, then composition sequences, then trigger
        suggestions. Empty entries are skipped; duplicates are kept.
        """
        refs: list[str] = [dep.skill for dep in self.dependencies if dep.skill]
        for comp in self.composition:
            refs.extend(step for step in comp.sequence if step)
        refs.extend(trigger.suggest for trigger in self.triggers if trigger.suggest)
        return refs


# =============================================================================
# sharp-edges.yaml
# =============================================================================


class SharpEdge(_IdDescription):
    """A known pitfall."""


class SharpEdges(DocumentModel):
    """Contents of sharp-edges.yaml."""

    edges: list[SharpEdge] = _pydantic.Field(default_factory=list)


# =============================================================================
# validations.yaml
# =============================================================================


class Validation(DocumentModel):
    """A single validation command."""

    id: str = ""
    name: str = ""
    type: str = "command"
    command: str = ""
    message: str = ""

    @_pydantic.field_validator("id", "name", "type", "command", "message", mode="before")
    @classmethod
    def coerce_text(cls, value: _typing.Any) -> str:
        return as_text(value)

    @property
    def failure_message(self) -> str:
        """Message reported when the command fails."""
        return self.message or f"Validation {self.id} failed"


class Validations(DocumentModel):
    """Contents of validations.yaml."""

    validations: list[Validation] = _pydantic.Field(default_factory=list)
    on_stop: list[str] = _pydantic.Field(default_factory=list)

    @_pydantic.field_validator("on_stop", mode="before")
    @classmethod
    def coerce_text_list(cls, value: _typing.Any) -> _typing.Any:
        return as_text_list(value)

    def get(self, validation_id: str) -> Validation | None:
        """Return the first validation with the given id."""
        for validation in self.validations:
            if validation.id == validation_id:
                return validation
        return None

    @property
    def ids(self) -> list[str]:
        """Ids of all validations that declare one, in order."""
        return [v.id for v in self.validations if v.id]


# =============================================================================
# Loading
# =============================================================================

DocumentT = _typing.TypeVar("DocumentT", bound=_pydantic.BaseModel)


def load_yaml_mapping(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Read a YAML file whose top level must be a mapping.

    Returns:
        Parsed mapping (empty for an empty file).

    Raises:
        SkillFileError: If the file cannot be read, is not valid YAML,
            or its top level is not a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SkillFileError(path, f"cannot read file: {e}") from e

    try:
        data = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise SkillFileError(path, f"Invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SkillFileError(
            path, f"expected a YAML mapping, got {type(data).__name__}"
        )
    return data


def load_yaml_document(path: _pathlib.Path, model: type[DocumentT]) -> DocumentT:
    """
    Load a YAML file into a pydantic model.

    Args:
        path: File to read.
        model: Pydantic model class to validate against.

    Returns:
        The validated model; an empty file yields the model's defaults.

    Raises:
        SkillFileError: On read, YAML or schema errors.
    """
    data = load_yaml_mapping(path)
    try:
        return model.model_validate(data)
    except _pydantic.ValidationError as e:
        raise SkillFileError(path, f"invalid structure: {e}") from e
