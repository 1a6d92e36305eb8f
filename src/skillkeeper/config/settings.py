"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with SKILLKEEPER_ prefix
3. .env file (if present)
4. Project config file: .skillkeeper.yaml in the project root

Nested config uses double underscore delimiter:
  SKILLKEEPER_AUDIT__SKILL_PREFIX=acme-
  SKILLKEEPER_PATHS__SKILLS_DIR=skills
"""

import os as _os
import pathlib as _pathlib
import subprocess as _subprocess
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import skillkeeper.config.sources as sources
import skillkeeper.config.types as types

ENV_ROOT = "SKILLKEEPER_ROOT"
ENV_ENV_FILE = "SKILLKEEPER_ENV_FILE"

PROJECT_MARKERS = (".claude", "CLAUDE.md", ".git", "pyproject.toml")
"""Files or directories that identify a project root when git is unavailable."""


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Priority:
    1. SKILLKEEPER_ENV_FILE if set (explicit override)
    2. .env in the current directory
    3. None (rely on environment variables)
    """
    if env_file := _os.environ.get(ENV_ENV_FILE):
        if _pathlib.Path(env_file).exists():
            return env_file
        # If explicitly set but doesn't exist, don't fall back silently
        return None

    if _pathlib.Path(".env").exists():
        return ".env"
    return None


def find_git_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path | None:
    """Find the git repository root from the given path or current directory."""
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    try:
        result = _subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            cwd=start_path,
            timeout=5,
        )
        if result.returncode == 0:
            return _pathlib.Path(result.stdout.strip())
    except (_subprocess.TimeoutExpired, FileNotFoundError, OSError):
        pass
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Tries (in order):
    1. Git repository root
    2. Nearest directory containing .claude, CLAUDE.md, .git or pyproject.toml
    3. Current working directory

    Args:
        start_path: Starting path for search. Defaults to cwd.
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    git_root = find_git_root(start_path)
    if git_root:
        return git_root

    current = start_path.resolve()
    while current != current.parent:
        if any((current / marker).exists() for marker in PROJECT_MARKERS):
            return current
        current = current.parent

    return _pathlib.Path.cwd()


def _resolve_root(init_kwargs: _typing.Mapping[str, _typing.Any]) -> _pathlib.Path:
    """Resolve the project root before the other settings are loaded."""
    explicit = init_kwargs.get("root") or _os.environ.get(ENV_ROOT)
    if explicit:
        return _pathlib.Path(explicit).expanduser().resolve()
    return find_project_root()


class Settings(_pydantic_settings.BaseSettings):
    """
    Skillkeeper configuration settings.

    All settings can be overridden via environment variables with SKILLKEEPER_ prefix.
    For nested config, use double underscore: SKILLKEEPER_DOCS__KIND_ORDER='["gate"]'

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (SKILLKEEPER_*)
    3. .env file
    4. Project config (.skillkeeper.yaml)
    5. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SKILLKEEPER_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # SKILLKEEPER_AUDIT__SKILL_PREFIX
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (SKILLKEEPER_* env vars)
        3. dotenv_settings (.env file)
        4. project YAML (.skillkeeper.yaml)
        5. (defaults via Field definitions), lowest
        """
        init_kwargs = getattr(init_settings, "init_kwargs", {})
        project_root = _resolve_root(init_kwargs)

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.ProjectYamlSettingsSource(settings_cls, project_root),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation and CI where a stray .env must not leak in.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Nested config sections
    # =========================================================================

    paths: types.PathsConfig = _pydantic.Field(default_factory=types.PathsConfig)
    """Locations of the skills directory, CLAUDE.md and the reference."""

    audit: types.AuditConfig = _pydantic.Field(default_factory=types.AuditConfig)
    """Audit and structure-check rules."""

    docs: types.DocsConfig = _pydantic.Field(default_factory=types.DocsConfig)
    """Generated documentation and lint settings."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Console logging settings."""

    # =========================================================================
    # Runtime overrides
    # =========================================================================

    root: str | None = _pydantic.Field(
        default=None,
        description="Explicit project root (skips git and marker detection)",
    )

    _project_root: _pathlib.Path | None = _pydantic.PrivateAttr(default=None)

    # =========================================================================
    # Directory settings (computed at runtime)
    # =========================================================================

    @property
    def project_root(self) -> _pathlib.Path:
        """
        Project root directory (explicit root, git root, marker dir or cwd).

        Resolved on first access and reused, so git runs at most once.
        """
        if self._project_root is None:
            if self.root:
                self._project_root = _pathlib.Path(self.root).expanduser().resolve()
            else:
                self._project_root = find_project_root()
        return self._project_root

    def resolve_path(self, value: str) -> _pathlib.Path:
        """Resolve a configured path against the project root."""
        path = _pathlib.Path(value).expanduser()
        if path.is_absolute():
            return path
        return self.project_root / path

    @property
    def skills_dir(self) -> _pathlib.Path:
        """Directory holding the skill folders."""
        return self.resolve_path(self.paths.skills_dir)

    @property
    def claude_md_path(self) -> _pathlib.Path:
        """Project CLAUDE.md."""
        return self.resolve_path(self.paths.claude_md)

    @property
    def reference_path(self) -> _pathlib.Path:
        """Generated skills reference document."""
        return self.resolve_path(self.paths.reference)

    @property
    def config_file(self) -> _pathlib.Path:
        """Project config file location (may not exist)."""
        return sources.get_project_config_path(self.project_root)

    # =========================================================================
    # Introspection
    # =========================================================================

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Get unknown fields at the top level of Settings."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Recursively collect all extra fields from Settings and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"audit.skil_prefix": "acme-"}
        """
        result: dict[str, _typing.Any] = dict(self.get_extra_fields())
        for field_name in ["paths", "audit", "docs", "logging"]:
            nested = getattr(self, field_name, None)
            if nested is not None and hasattr(nested, "collect_all_extra_fields"):
                result.update(nested.collect_all_extra_fields(prefix=field_name))
        return result

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert settings to dictionary (for JSON output)."""
        return {
            "project_root": str(self.project_root),
            "config_file": str(self.config_file),
            "config_file_exists": self.config_file.is_file(),
            "skills_dir": str(self.skills_dir),
            "claude_md": str(self.claude_md_path),
            "reference": str(self.reference_path),
            "paths": self.paths.model_dump(),
            "audit": self.audit.model_dump(),
            "docs": self.docs.model_dump(),
            "logging": self.logging.model_dump(),
            "unknown_fields": self.collect_all_extra_fields(),
        }
