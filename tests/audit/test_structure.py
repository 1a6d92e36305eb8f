"""Tests for the YAML structure check."""

import skillkeeper.audit.structure as structure
import skillkeeper.config.types as types
import skillkeeper.constants as constants

VALIDATIONS = {
    "validations": [
        {"id": "lint", "name": "Lint", "type": "command", "command": "true"},
    ],
    "on_stop": ["lint"],
}


def _messages(project, config: types.AuditConfig | None = None) -> list[str]:
    return structure.check_structure(project.skills_dir, config).messages()


class TestStructureChecker:
    """Tests for StructureChecker."""

    def test_valid_tree(self, project) -> None:
        project.add_skill("gate-a", validations=VALIDATIONS)
        project.add_skill("tool", "helper")
        report = structure.check_structure(project.skills_dir)
        assert report.findings == []
        assert report.checked == 2

    def test_invalid_yaml_per_file(self, project) -> None:
        project.add_skill("gate-a")
        project.write("gate-a", constants.SKILL_YAML, "name: [oops\n")
        project.write("gate-a", constants.SHARP_EDGES_YAML, "- a\n- list\n")
        assert _messages(project) == [
            "gate-a/skill.yaml: Invalid YAML",
            "gate-a/sharp-edges.yaml: Invalid YAML",
        ]

    def test_frontmatter_name_must_match(self, project) -> None:
        project.add_skill("gate-a", frontmatter={"name": "gate-b", "description": "x"})
        assert _messages(project) == [
            "gate-a: SKILL.md name 'gate-b' must equal directory name 'gate-a'"
        ]

    def test_validations_only_directory(self, project) -> None:
        project.write_yaml("orphan", constants.VALIDATIONS_YAML, VALIDATIONS)
        assert _messages(project) == [
            "orphan: Missing SKILL.md",
            "orphan: SKILL.md missing or has no frontmatter, but validations.yaml exists",
        ]

    def test_validations_need_stop_hook(self, project) -> None:
        project.add_skill("tool", "helper", validations=VALIDATIONS)
        assert _messages(project) == [
            "tool: validations.yaml exists but SKILL.md has no Stop hook"
        ]

    def test_stop_hook_must_call_validate(self, project) -> None:
        project.add_skill(
            "gate-a",
            frontmatter={
                "name": "gate-a",
                "description": "x",
                "hooks": {"Stop": [{"command": "echo hi"}]},
            },
            validations=VALIDATIONS,
        )
        assert _messages(project) == [
            "gate-a: Stop hook must call 'task claude:validate-skill -- --skill gate-a' "
            "(validations.yaml exists)"
        ]

    def test_stop_hook_not_required_without_validations(self, project) -> None:
        project.add_skill("gate-a", frontmatter={"name": "gate-a", "description": "x"})
        assert _messages(project) == []

    def test_validation_integrity(self, project) -> None:
        project.add_skill(
            "gate-a",
            validations={
                "validations": [
                    {"name": "no id", "command": "true"},
                    {"id": "prompt", "type": "prompt", "command": "ask"},
                    {"id": "empty"},
                ],
                "on_stop": ["empty", "ghost"],
            },
        )
        assert _messages(project) == [
            "gate-a: validations.yaml validations[0] missing 'id' field",
            "gate-a: validations.yaml validation 'prompt' has type 'prompt' "
            "(only 'command' is supported)",
            "gate-a: validations.yaml validation 'empty' missing 'command' field",
            "gate-a: validations.yaml on_stop references non-existent validation 'ghost'",
        ]

    def test_unresolved_reference(self, project) -> None:
        project.add_skill("gate-a", collaboration={"triggers": [{"suggest": "ghost"}]})
        assert _messages(project) == [
            "gate-a: collaboration.yaml references non-existent skill 'ghost'"
        ]

    def test_prefix_is_an_error(self, project) -> None:
        project.add_skill("stray")
        assert _messages(project, types.AuditConfig(skill_prefix="acme-")) == [
            "stray: Directory name must start with 'acme-'"
        ]

    def test_kind_is_not_checked(self, project) -> None:
        project.add_skill("fruit", "banana")
        assert _messages(project) == []
