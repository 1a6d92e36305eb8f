"""Custom pydantic-settings sources for Skillkeeper configuration.

This module provides:

- ProjectYamlSettingsSource: A pydantic-settings source that loads the
  optional project configuration file (.skillkeeper.yaml) from the
  project root.

Configuration layers (in precedence order, highest first):
1. Constructor arguments
2. Environment variables (SKILLKEEPER_*, handled by pydantic-settings)
3. .env file
4. Project config: .skillkeeper.yaml in project root
5. Field defaults
"""

import collections.abc as _abc
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import skillkeeper.constants as constants


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """
    Get the path to the project config file.

    Args:
        project_root: The project root directory.

    Returns:
        Path to .skillkeeper.yaml within the project.
    """
    return project_root / constants.PROJECT_CONFIG_FILE


def load_config_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML config file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents; an empty dict when the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class ProjectYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source backed by the project's .skillkeeper.yaml.

    The file is optional. It is read once at construction; Pydantic then
    validates the returned dict like any other source.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path,
        *,
        config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the source.

        Args:
            settings_cls: The Settings class being configured.
            project_root: Project root used to locate .skillkeeper.yaml.
            config_path: Explicit config file (overrides the project path).
        """
        super().__init__(settings_cls)
        self._path = config_path or get_project_config_path(project_root)
        self._data: dict[str, _typing.Any] = (
            load_config_file(self._path) if self._path.is_file() else {}
        )

    @property
    def path(self) -> _pathlib.Path:
        """The config file this source reads."""
        return self._path

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the loaded file.

        Returns:
            Tuple of (value, field_name, is_complex).
        """
        value = self._data.get(field_name, None)
        if value is None:
            return None, field_name, False
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """
        Return the file contents as a plain dict for Pydantic validation.

        Unknown keys are kept so they land in Settings.model_extra.
        """
        return dict(self._data)
