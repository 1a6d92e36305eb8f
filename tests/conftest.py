"""
Shared pytest fixtures for Skillkeeper tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.

Most tests build a throwaway project with the `project` fixture:

    def test_something(project):
        project.add_skill("my-gate", kind="gate")
        project.write_claude_md()
        report = audit.audit_skills(project.skills_dir, claude_md=project.claude_md)
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest
import yaml as _yaml

import skillkeeper.constants as constants

# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Drop SKILLKEEPER_* variables so the developer's shell cannot leak in."""
    for key in list(_os.environ):
        if key.startswith("SKILLKEEPER_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Skill tree factory
# =============================================================================

_MISSING: _typing.Any = object()


def stop_hook(skill_name: str, *, nested: bool = True) -> dict[str, _typing.Any]:
    """Frontmatter `hooks` mapping whose Stop hook calls the validate command."""
    command = constants.DEFAULT_STOP_HOOK_COMMAND.replace("{skill}", skill_name)
    if nested:
        entry: dict[str, _typing.Any] = {"hooks": [{"type": "command", "command": command}]}
    else:
        entry = {"type": "command", "command": command}
    return {"Stop": [entry]}


def render_skill_md(frontmatter: dict[str, _typing.Any] | None, body: str) -> str:
    """SKILL.md text for a frontmatter mapping (None writes no frontmatter)."""
    if frontmatter is None:
        return body
    header = _yaml.safe_dump(frontmatter, sort_keys=False)
    return f"---\n{header}---\n\n{body}"


class SkillProject:
    """A project root with a skills directory, built up by tests."""

    def __init__(self, root: _pathlib.Path) -> None:
        self.root = root
        self.skills_dir = root / constants.DEFAULT_SKILLS_DIR
        self.skills_dir.mkdir(parents=True)
        self.claude_md = root / constants.DEFAULT_CLAUDE_MD
        self.reference = root / constants.DEFAULT_REFERENCE
        self.names: list[str] = []

    def skill_dir(self, name: str) -> _pathlib.Path:
        return self.skills_dir / name

    def write(self, name: str, filename: str, content: str) -> _pathlib.Path:
        """Write a raw file into a skill directory."""
        path = self.skill_dir(name) / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def write_yaml(self, name: str, filename: str, data: _typing.Any) -> _pathlib.Path:
        return self.write(name, filename, _yaml.safe_dump(data, sort_keys=False))

    def add_skill(
        self,
        name: str,
        kind: str = "gate",
        *,
        description: str | None = None,
        frontmatter: dict[str, _typing.Any] | None = _MISSING,
        body: str = "Rules live in skill.yaml; pitfalls in sharp-edges.yaml.\n",
        spec: dict[str, _typing.Any] | None = _MISSING,
        collaboration: dict[str, _typing.Any] | None = _MISSING,
        sharp_edges: dict[str, _typing.Any] | None = _MISSING,
        validations: dict[str, _typing.Any] | None = None,
        skip: _typing.Iterable[str] = (),
    ) -> _pathlib.Path:
        """
        Create a skill that passes the audit for its kind.

        Pass a mapping to replace a file's default content, None to leave
        the file out, or list file names in `skip` to drop them afterwards.
        """
        description = description or f"Checks {name} conventions before work starts"
        skill_dir = self.skill_dir(name)
        skill_dir.mkdir(parents=True, exist_ok=True)

        if frontmatter is _MISSING:
            frontmatter = {"name": name, "description": description}
            if kind != constants.HELPER_KIND:
                frontmatter["hooks"] = stop_hook(name)
        if frontmatter is not None or body:
            self.write(name, constants.SKILL_MD, render_skill_md(frontmatter, body))

        if spec is _MISSING:
            spec = {
                "name": name,
                "kind": kind,
                "description": description,
                "version": "1.0.0",
                "tags": ["testing"],
            }
            if kind in constants.PROCEDURE_KINDS:
                spec["procedure"] = ["Read the rules", "Apply them"]
        if spec is not None:
            self.write_yaml(name, constants.SKILL_YAML, spec)

        if collaboration is _MISSING:
            collaboration = {"dependencies": [], "composition": [], "triggers": []}
        if collaboration is not None:
            self.write_yaml(name, constants.COLLABORATION_YAML, collaboration)

        if sharp_edges is _MISSING:
            sharp_edges = {
                "edges": [{"id": "stale-cache", "description": "Results cached across runs"}]
            }
        if sharp_edges is not None:
            self.write_yaml(name, constants.SHARP_EDGES_YAML, sharp_edges)

        if validations is not None:
            self.write_yaml(name, constants.VALIDATIONS_YAML, validations)

        for filename in skip:
            (skill_dir / filename).unlink()

        if name not in self.names:
            self.names.append(name)
        return skill_dir

    def write_claude_md(
        self,
        names: _typing.Iterable[str] | None = None,
        *,
        extra: str = "",
    ) -> _pathlib.Path:
        """Write a lint-clean CLAUDE.md that mentions the given skills."""
        mentioned = self.names if names is None else list(names)
        lines = [
            "# Project",
            "",
            "Built with: Python, click, pydantic",
            "",
            "### Skill kinds",
            "",
            *(f"- `{name}`" for name in mentioned),
            "",
            "## Skills",
            "",
            constants.TABLE_START_MARKER,
            constants.TABLE_END_MARKER,
            "",
        ]
        content = "\n".join(lines) + extra
        self.claude_md.write_text(content, encoding="utf-8")
        return self.claude_md


@_pytest.fixture
def project(tmp_path: _pathlib.Path) -> SkillProject:
    """An empty project with a `.claude/skills` directory."""
    return SkillProject(tmp_path / "project")


@_pytest.fixture
def cli_runner() -> _click_testing.CliRunner:
    """Click test runner."""
    return _click_testing.CliRunner()
