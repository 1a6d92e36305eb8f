"""Tests for skill discovery and the registry."""

import pathlib as _pathlib

import pytest as _pytest

import skillkeeper.constants as constants
import skillkeeper.skills.discovery as discovery
import skillkeeper.skills.registry as registry


class TestSkillDiscovery:
    """Tests for SkillDiscovery."""

    def test_missing_directory_raises(self, tmp_path: _pathlib.Path) -> None:
        finder = discovery.SkillDiscovery(tmp_path / "nope")
        with _pytest.raises(discovery.SkillsDirectoryNotFoundError, match="No skills directory"):
            finder.discover()

    def test_missing_directory_is_file_not_found(self) -> None:
        assert issubclass(discovery.SkillsDirectoryNotFoundError, FileNotFoundError)

    def test_sorted_by_name(self, project) -> None:
        for name in ["zeta", "alpha", "mid"]:
            project.add_skill(name)
        names = [s.name for s in discovery.SkillDiscovery(project.skills_dir).discover()]
        assert names == ["alpha", "mid", "zeta"]

    def test_hidden_and_plain_files_ignored(self, project) -> None:
        project.add_skill("real")
        (project.skills_dir / ".cache").mkdir()
        (project.skills_dir / ".cache" / constants.SKILL_MD).write_text("---\n---\n")
        (project.skills_dir / "README.md").write_text("notes")
        names = [s.name for s in discovery.SkillDiscovery(project.skills_dir).discover()]
        assert names == ["real"]

    def test_markers_select_directories(self, project) -> None:
        project.add_skill("full")
        project.write_yaml("validations-only", constants.VALIDATIONS_YAML, {"validations": []})
        (project.skills_dir / "empty").mkdir()

        finder = discovery.SkillDiscovery(project.skills_dir)
        assert [s.name for s in finder.discover()] == ["full"]
        assert [
            s.name for s in finder.discover((constants.SKILL_MD, constants.VALIDATIONS_YAML))
        ] == ["full", "validations-only"]


class TestSkillRegistry:
    """Tests for SkillRegistry."""

    def test_lookup(self, project) -> None:
        project.add_skill("a-gate")
        project.add_skill("b-helper", "helper")
        reg = registry.SkillRegistry(project.skills_dir)

        assert reg.names() == ["a-gate", "b-helper"]
        assert len(reg) == 2
        assert reg.has_skill("b-helper")
        assert reg.get_skill("missing") is None

    def test_yaml_only_skill_is_listed(self, project) -> None:
        project.add_skill("yaml-only", frontmatter=None, body="")
        reg = registry.SkillRegistry(project.skills_dir)
        assert reg.names() == ["yaml-only"]

    def test_discover_rescans(self, project) -> None:
        project.add_skill("first")
        reg = registry.SkillRegistry(project.skills_dir)
        assert reg.names() == ["first"]

        project.add_skill("second")
        assert reg.names() == ["first"]
        reg.discover()
        assert reg.names() == ["first", "second"]

    def test_to_dict(self, project) -> None:
        project.add_skill("a-gate")
        data = registry.SkillRegistry(project.skills_dir).to_dict()
        assert data["skill_count"] == 1
        assert data["skills"][0]["name"] == "a-gate"
        assert data["skills"][0]["stop_hooks"] == [
            "task claude:validate-skill -- --skill a-gate"
        ]
