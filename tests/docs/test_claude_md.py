"""Tests for the CLAUDE.md skills table."""

import pytest as _pytest

import skillkeeper.constants as constants
import skillkeeper.docs.catalog as catalog
import skillkeeper.docs.claude_md as claude_md

START = constants.TABLE_START_MARKER
END = constants.TABLE_END_MARKER


class TestRenderTable:
    def test_rows_and_invocable_names(self) -> None:
        entries = [
            catalog.SkillEntry(name="commit", kind="helper", description="Writes a | b"),
            catalog.SkillEntry(name="tdd-gate", kind="gate", description="Tests first"),
            catalog.SkillEntry(
                name="deploy", kind="helper", description="Ships it", user_invocable=True
            ),
        ]
        assert claude_md.render_table(entries) == [
            "| Skill | Kind | Description |",
            "|-------|------|-------------|",
            "| `tdd-gate` | gate | Tests first |",
            "| `commit` | helper | Writes a \\| b |",
            "| `deploy` (`/deploy`) | helper | Ships it |",
        ]


class TestReplaceTable:
    def test_replaces_only_between_markers(self) -> None:
        content = f"# Top\n{START}\nold row\n{END}\nBottom\n"
        result = claude_md.replace_table(content, ["| new |"])
        assert result == f"# Top\n{START}\n\n| new |\n\n{END}\nBottom\n"

    def test_is_idempotent(self) -> None:
        content = f"intro\n\n{START}\n{END}\n"
        once = claude_md.replace_table(content, ["| a |"])
        assert claude_md.replace_table(once, ["| a |"]) == once

    def test_text_outside_markers_kept_verbatim(self) -> None:
        content = f"# T\nline\u2028same line\n{START}\n{END}\nform\x0cfeed\x85x\n"
        result = claude_md.replace_table(content, ["| a |"])
        assert result == (
            f"# T\nline\u2028same line\n{START}\n\n| a |\n\n{END}\nform\x0cfeed\x85x\n"
        )

    def test_missing_start_marker(self) -> None:
        with _pytest.raises(claude_md.MarkerNotFoundError, match="SKILLS_TABLE_START"):
            claude_md.replace_table(f"text\n{END}\n", [])

    def test_missing_end_marker(self) -> None:
        with _pytest.raises(claude_md.MarkerNotFoundError, match="SKILLS_TABLE_END"):
            claude_md.replace_table(f"{START}\ntext\n", [])

    def test_end_before_start(self) -> None:
        with _pytest.raises(claude_md.MarkerNotFoundError, match="after start marker"):
            claude_md.replace_table(f"{END}\n{START}\n", [])

    def test_extract_section(self) -> None:
        content = f"a\n{START}\nrow\n{END}\nb\n"
        assert claude_md.extract_table_section(content) == f"{START}\nrow\n{END}"


class TestUpdateClaudeMd:
    def test_writes_table(self, project) -> None:
        project.add_skill("gate-a")
        project.write_claude_md()

        count = claude_md.update_claude_md(project.skills_dir, project.claude_md)

        assert count == 1
        content = project.claude_md.read_text(encoding="utf-8")
        assert f"{START}\n\n| Skill | Kind | Description |" in content
        assert "| `gate-a` | gate | Checks gate-a conventions before work starts |" in content
        assert content.startswith("# Project\n\nBuilt with:")

    def test_second_run_is_byte_identical(self, project) -> None:
        project.add_skill("gate-a")
        project.add_skill("tool", "helper")
        project.write_claude_md()

        claude_md.update_claude_md(project.skills_dir, project.claude_md)
        first = project.claude_md.read_bytes()
        claude_md.update_claude_md(project.skills_dir, project.claude_md)
        assert project.claude_md.read_bytes() == first

    def test_missing_file(self, project) -> None:
        project.add_skill("gate-a")
        with _pytest.raises(FileNotFoundError):
            claude_md.update_claude_md(project.skills_dir, project.claude_md)

    def test_missing_marker_leaves_file_untouched(self, project) -> None:
        project.add_skill("gate-a")
        project.claude_md.write_text("# No markers\n", encoding="utf-8")
        with _pytest.raises(claude_md.MarkerNotFoundError):
            claude_md.update_claude_md(project.skills_dir, project.claude_md)
        assert project.claude_md.read_text(encoding="utf-8") == "# No markers\n"

    def test_crlf_outside_markers_preserved(self, project) -> None:
        project.add_skill("gate-a")
        project.claude_md.write_bytes(
            f"# Project\r\nBuilt with: Python\r\n{START}\n{END}\nfooter\r\n".encode()
        )

        claude_md.update_claude_md(project.skills_dir, project.claude_md)

        content = project.claude_md.read_bytes().decode("utf-8")
        assert content.startswith("# Project\r\nBuilt with: Python\r\n")
        assert content.endswith(f"{END}\nfooter\r\n")
        assert "| `gate-a` | gate |" in content
