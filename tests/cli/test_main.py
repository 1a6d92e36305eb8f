"""Tests for CLI main module."""

import json as _json

import skillkeeper.cli as cli
import skillkeeper.constants as constants

VALIDATIONS = {
    "validations": [
        {"id": "ok", "name": "Always passes", "command": "true"},
        {"id": "bad", "name": "Always fails", "command": "false", "message": "It broke"},
    ],
    "on_stop": ["ok"],
}


def _invoke(runner, project, *args: str):
    return runner.invoke(cli.cli, ["--project-root", str(project.root), *args])


class TestCLIBasics:
    """Help, version and config."""

    def test_help_lists_commands(self, cli_runner) -> None:
        result = cli_runner.invoke(cli.cli, ["--help"])
        assert result.exit_code == 0
        for cmd in ["audit", "check", "validate", "docs", "list", "show", "config"]:
            assert cmd in result.output, f"Command '{cmd}' missing from help"

    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(cli.cli, ["--version"])
        assert result.exit_code == 0
        assert "skillkeeper" in result.output

    def test_config_json(self, cli_runner, project) -> None:
        result = _invoke(cli_runner, project, "config", "--json")
        assert result.exit_code == 0
        data = _json.loads(result.stdout)
        assert data["skills_dir"].endswith("skills")
        assert data["audit"]["skill_prefix"] == ""

    def test_config_text(self, cli_runner, project) -> None:
        result = _invoke(cli_runner, project, "config")
        assert result.exit_code == 0
        assert "Skillkeeper Configuration:" in result.stdout
        assert "Skills Dir:" in result.stdout

    def test_malformed_config_file(self, cli_runner, project) -> None:
        (project.root / ".skillkeeper.yaml").write_text("audit: [\n")
        result = _invoke(cli_runner, project, "config")
        assert result.exit_code == 1


class TestSkillCommands:
    """list and show."""

    def test_list_json(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        project.add_skill("tool", "helper")
        result = _invoke(cli_runner, project, "list", "--json")
        assert result.exit_code == 0
        data = _json.loads(result.stdout)
        assert [s["name"] for s in data["skills"]] == ["gate-a", "tool"]

    def test_list_text(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        result = _invoke(cli_runner, project, "list")
        assert result.exit_code == 0
        assert "gate-a" in result.stdout

    def test_list_without_skills_directory(self, cli_runner, tmp_path) -> None:
        result = cli_runner.invoke(cli.cli, ["--project-root", str(tmp_path), "list"])
        assert result.exit_code == 1

    def test_show(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        result = _invoke(cli_runner, project, "show", "gate-a", "--json")
        assert result.exit_code == 0
        assert _json.loads(result.stdout)["kind"] == "gate"

    def test_show_unknown(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        result = _invoke(cli_runner, project, "show", "ghost")
        assert result.exit_code == 1


class TestAuditCommand:
    """skillkeeper audit."""

    def test_passes(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        project.write_claude_md()
        result = _invoke(cli_runner, project, "audit")
        assert result.exit_code == 0
        assert "Audit passed: 1 skill(s) checked, 0 warning(s)" in result.stdout

    def test_errors_exit_1(self, cli_runner, project) -> None:
        project.add_skill("gate-a", skip=[constants.SHARP_EDGES_YAML])
        result = _invoke(cli_runner, project, "audit")
        assert result.exit_code == 1
        assert "Errors (1):" in result.stdout
        assert "  - gate-a: Missing sharp-edges.yaml (required for kind 'gate')" in result.stdout

    def test_warnings_pass_unless_strict(self, cli_runner, project) -> None:
        project.add_skill("gate-a", body="## Patterns Enforced\n")
        result = _invoke(cli_runner, project, "audit")
        assert result.exit_code == 0
        assert "Warnings (1):" in result.stdout
        assert "1 warning(s)" in result.stdout

        strict = _invoke(cli_runner, project, "audit", "--strict")
        assert strict.exit_code == 1
        assert "Strict mode: treating warnings as errors" in strict.stdout

    def test_json(self, cli_runner, project) -> None:
        project.add_skill("gate-a", collaboration={"triggers": [{"suggest": "ghost"}]})
        result = _invoke(cli_runner, project, "audit", "--json")
        assert result.exit_code == 1
        data = _json.loads(result.stdout)
        assert data["passed"] is False
        assert data["errors"][0]["message"] == (
            "collaboration.yaml references non-existent skill 'ghost'"
        )

    def test_missing_skills_directory(self, cli_runner, tmp_path) -> None:
        result = cli_runner.invoke(cli.cli, ["--project-root", str(tmp_path), "audit"])
        assert result.exit_code == 1


class TestCheckCommand:
    """skillkeeper check."""

    def test_valid(self, cli_runner, project) -> None:
        project.add_skill("gate-a", validations=VALIDATIONS)
        result = _invoke(cli_runner, project, "check")
        assert result.exit_code == 0
        assert "All 1 skill(s) valid" in result.stdout

    def test_invalid_yaml(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        project.write("gate-a", constants.SKILL_YAML, "name: [\n")
        result = _invoke(cli_runner, project, "check")
        assert result.exit_code == 1
        assert "Found 1 error(s):" in result.stdout
        assert "  - gate-a/skill.yaml: Invalid YAML" in result.stdout


class TestValidateCommand:
    """skillkeeper validate."""

    def test_on_stop(self, cli_runner, project) -> None:
        project.add_skill("gate-a", validations=VALIDATIONS)
        result = _invoke(cli_runner, project, "validate", "--skill", "gate-a")
        assert result.exit_code == 0
        assert "=== gate-a: OK ===" in result.stdout

    def test_all_reports_failures(self, cli_runner, project) -> None:
        project.add_skill("gate-a", validations=VALIDATIONS)
        result = _invoke(cli_runner, project, "validate", "--skill", "gate-a", "--mode", "all")
        assert result.exit_code == 1
        assert "    FAILED: It broke" in result.stdout
        assert "FAILED: 1 validation(s): bad" in result.stdout

    def test_no_validations(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        result = _invoke(cli_runner, project, "validate", "--skill", "gate-a")
        assert result.exit_code == 0
        assert "No validations.yaml for gate-a" in result.stdout

    def test_unknown_skill(self, cli_runner, project) -> None:
        result = _invoke(cli_runner, project, "validate", "--skill", "ghost")
        assert result.exit_code == 1

    def test_usage_errors_exit_2(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        assert _invoke(cli_runner, project, "validate").exit_code == 2
        bad_mode = _invoke(cli_runner, project, "validate", "--skill", "gate-a", "--mode", "x")
        assert bad_mode.exit_code == 2

    def test_json(self, cli_runner, project) -> None:
        project.add_skill("gate-a", validations=VALIDATIONS)
        result = _invoke(
            cli_runner, project, "validate", "--skill", "gate-a", "--mode", "all", "--json"
        )
        assert result.exit_code == 1
        assert _json.loads(result.stdout)["failed"] == ["bad"]


class TestDocsCommands:
    """skillkeeper docs ..."""

    def test_refresh_then_check(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        project.write_claude_md()

        stale = _invoke(cli_runner, project, "docs", "check")
        assert stale.exit_code == 1
        assert "out of sync" in stale.stdout

        assert _invoke(cli_runner, project, "docs", "refresh").exit_code == 0
        assert project.reference.is_file()

        fresh = _invoke(cli_runner, project, "docs", "check")
        assert fresh.exit_code == 0
        assert "All docs in sync" in fresh.stdout

    def test_reference_and_table_separately(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        project.write_claude_md()
        assert _invoke(cli_runner, project, "docs", "reference").exit_code == 0
        assert _invoke(cli_runner, project, "docs", "update-claude-md").exit_code == 0
        assert "| `gate-a` | gate |" in project.claude_md.read_text(encoding="utf-8")

    def test_update_without_markers(self, cli_runner, project) -> None:
        project.add_skill("gate-a")
        project.claude_md.write_text("# Nothing here\n", encoding="utf-8")
        result = _invoke(cli_runner, project, "docs", "update-claude-md")
        assert result.exit_code == 1

    def test_reference_without_skills(self, cli_runner, project) -> None:
        result = _invoke(cli_runner, project, "docs", "reference")
        assert result.exit_code == 1

    def test_lint(self, cli_runner, project) -> None:
        project.write_claude_md()
        result = _invoke(cli_runner, project, "docs", "lint")
        assert result.exit_code == 0
        assert "CLAUDE.md lint: all checks passed" in result.stdout

    def test_lint_errors(self, cli_runner, project) -> None:
        project.write_claude_md(extra="## Installation\n")
        result = _invoke(cli_runner, project, "docs", "lint")
        assert result.exit_code == 1
        assert "ERROR: CLAUDE.md:" in result.stdout

    def test_lint_other_file(self, cli_runner, project) -> None:
        other = project.root / "AGENTS.md"
        other.write_text("# Agents\n", encoding="utf-8")
        result = _invoke(cli_runner, project, "docs", "lint", "--file", str(other))
        assert result.exit_code == 1
        assert "AGENTS.md" in result.stdout

    def test_lint_missing_file(self, cli_runner, project) -> None:
        result = _invoke(cli_runner, project, "docs", "lint")
        assert result.exit_code == 1
