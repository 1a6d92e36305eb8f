"""Tests for the documentation catalog."""

import pytest as _pytest

import skillkeeper.constants as constants
import skillkeeper.docs.catalog as catalog


class TestLoadCatalog:
    """Tests for load_catalog and build_entry."""

    def test_entry_fields(self, project) -> None:
        project.add_skill(
            "commit",
            "helper",
            frontmatter={"name": "commit", "description": "x", "user-invocable": True},
            spec={
                "name": "commit",
                "kind": "helper",
                "description": "Writes\n  conventional commits",
                "version": 2,
                "severity": "low",
                "tags": ["git", " vcs "],
                "purpose": "Keep history tidy",
                "owns": ["commit messages"],
                "anti_patterns": [{"id": "wip", "description": "WIP commits"}],
            },
        )
        (entry,) = catalog.load_catalog(project.skills_dir)

        assert entry.name == "commit"
        assert entry.kind == "helper"
        assert entry.description == "Writes conventional commits"
        assert entry.version == "2"
        assert entry.tags == ("git", "vcs")
        assert entry.owns == ("commit messages",)
        assert entry.anti_patterns == ("wip: WIP commits",)
        assert entry.sharp_edges == ("stale-cache: Results cached across runs",)
        assert entry.user_invocable is True
        assert entry.when == "Writes conventional commits"

    def test_missing_kind_is_unknown(self, project) -> None:
        project.add_skill("odd", spec={"name": "odd"})
        (entry,) = catalog.load_catalog(project.skills_dir)
        assert entry.kind == catalog.UNKNOWN_KIND

    def test_only_skills_with_skill_yaml(self, project) -> None:
        project.add_skill("documented")
        project.add_skill("undocumented", spec=None)
        assert [e.name for e in catalog.load_catalog(project.skills_dir)] == ["documented"]

    def test_no_skills_raises(self, project) -> None:
        with _pytest.raises(catalog.NoSkillsFoundError, match="No skills found"):
            catalog.load_catalog(project.skills_dir)

    def test_bad_frontmatter_is_not_invocable(self, project) -> None:
        project.add_skill("broken")
        project.write("broken", constants.SKILL_MD, "---\nname: [oops\n---\n")
        (entry,) = catalog.load_catalog(project.skills_dir)
        assert entry.user_invocable is False


class TestGroupByKind:
    """Ordering of kinds and entries."""

    def test_display_order_then_unknown_kinds_sorted(self) -> None:
        entries = [
            catalog.SkillEntry(name="z", kind="zebra"),
            catalog.SkillEntry(name="m", kind="meta"),
            catalog.SkillEntry(name="b", kind="gate"),
            catalog.SkillEntry(name="a", kind="gate"),
            catalog.SkillEntry(name="q", kind="alpaca"),
        ]
        groups = catalog.group_by_kind(entries)
        assert [kind for kind, _ in groups] == ["gate", "meta", "alpaca", "zebra"]
        assert [e.name for e in groups[0][1]] == ["a", "b"]

    def test_input_order_does_not_matter(self) -> None:
        entries = [catalog.SkillEntry(name=n, kind=k) for n, k in [("a", "meta"), ("b", "gate")]]
        assert catalog.group_by_kind(entries) == catalog.group_by_kind(reversed(entries))

    def test_labels(self) -> None:
        assert catalog.kind_label("gate") == "Gates"
        assert catalog.kind_label("zebra") == "Other (zebra)"
        assert catalog.kind_description("zebra") == "Uncategorized skills"
