"""
Configuration module for Skillkeeper.

Uses pydantic-settings for environment variable loading and an optional
project-level .skillkeeper.yaml.
"""

from skillkeeper.config.settings import (
    Settings,
    find_git_root,
    find_project_root,
)
from skillkeeper.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings", "find_git_root", "find_project_root"]
