"""
Skillkeeper - tooling for multi-YAML AI assistant skills.

Audits skill directories against the four-file convention, runs
per-skill validations, and regenerates the derived skill documentation.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("skillkeeper")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Skillkeeper Contributors"

from skillkeeper.config import Settings  # noqa: E402

__all__ = ["__version__", "__version_info__", "Settings"]
