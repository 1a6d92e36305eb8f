"""
Main CLI entry point for Skillkeeper.

Reports go to stdout through click; progress and diagnostics go to the
Rich log handler on stderr.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click
import pydantic as _pydantic

import skillkeeper
import skillkeeper.audit as audit
import skillkeeper.config as config
import skillkeeper.console as console
import skillkeeper.constants as constants
import skillkeeper.docs as docs
import skillkeeper.docs.lint as lint
import skillkeeper.skills as skills
import skillkeeper.validation as validation

_logger = _logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"], "max_content_width": 100}

# Failures a command reports as a message plus exit 1 (never a traceback)
EXPECTED_ERRORS: tuple[type[Exception], ...] = (
    skills.SkillFileError,
    skills.SkillsDirectoryNotFoundError,
    docs.MarkerNotFoundError,
    docs.NoSkillsFoundError,
    config.ConfigFileError,
    validation.SkillNotFoundError,
    FileNotFoundError,
)


def _fail(error: Exception, json_output: bool = False) -> _typing.NoReturn:
    """Report an expected error and exit 1."""
    if json_output:
        _click.echo(_json.dumps({"error": str(error)}, indent=2))
    else:
        _click.echo(f"Error: {error}", err=True)
    raise SystemExit(constants.EXIT_FAILURE) from None


def _settings(ctx: _click.Context) -> config.Settings:
    return _typing.cast(config.Settings, ctx.obj["settings"])


def _echo_findings(title: str, findings: list[audit.Finding]) -> None:
    _click.echo(f"{title} ({len(findings)}):")
    for finding in findings:
        _click.echo(f"  - {finding}")
    _click.echo()


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(skillkeeper.__version__, "-v", "--version", prog_name="skillkeeper")
@_click.option(
    "--project-root",
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Project root (default: git root or nearest directory with .claude/CLAUDE.md)",
)
@_click.option("--debug", is_flag=True, help="Enable debug logging")
@_click.pass_context
def cli(ctx: _click.Context, project_root: _pathlib.Path | None, debug: bool) -> None:
    """
    Skillkeeper - audit, validate and document multi-YAML skills.

    \b
    Examples:
        skillkeeper audit                     # Semantic audit of all skills
        skillkeeper audit --strict            # Fail on warnings too
        skillkeeper check                     # YAML structure check (CI)
        skillkeeper validate --skill my-gate  # Run a skill's on_stop validations
        skillkeeper docs refresh              # Regenerate REFERENCE.md and CLAUDE.md table
        skillkeeper docs check                # Fail if generated docs are stale
    """
    kwargs: dict[str, _typing.Any] = {}
    if project_root is not None:
        kwargs["root"] = str(project_root)

    try:
        settings = config.Settings(**kwargs)
    except config.ConfigFileError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(constants.EXIT_FAILURE) from None
    except _pydantic.ValidationError as e:
        _click.echo(f"Error: invalid configuration: {e}", err=True)
        raise SystemExit(constants.EXIT_FAILURE) from None

    console.configure_logging(
        debug=debug or settings.logging.debug,
        show_timestamp=settings.logging.show_timestamp,
        timestamp_format=settings.logging.timestamp_format,
    )
    _logger.debug("Project root: %s", settings.project_root)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Skill Commands
# =============================================================================


@cli.command(name="list")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def list_cmd(ctx: _click.Context, json_output: bool) -> None:
    """List all skills in the skills directory."""
    settings = _settings(ctx)
    registry = skills.SkillRegistry(settings.skills_dir)

    try:
        skill_list = registry.list_skills()
    except EXPECTED_ERRORS as e:
        _fail(e, json_output)

    if json_output:
        _click.echo(_json.dumps(registry.to_dict(), indent=2))
        return

    if not skill_list:
        _click.echo(f"No skills found in {settings.skills_dir}")
        return

    _click.echo(f"Skills ({len(skill_list)}) in {settings.skills_dir}:")
    _click.echo(f"{'Name':<32} {'Kind':<12} {'Lines':<6} {'Stop hook'}")
    _click.echo("-" * 64)
    for skill in skill_list:
        try:
            spec = skill.load_spec()
            frontmatter = skill.load_frontmatter()
        except skills.SkillFileError as e:
            _logger.warning("%s", e)
            _click.echo(f"{skill.name:<32} {'(invalid)':<12}")
            continue
        kind = spec.kind if spec is not None else "-"
        hook = "yes" if frontmatter is not None and frontmatter.stop_hook_commands else "no"
        _click.echo(f"{skill.name:<32} {kind or '-':<12} {skill.skill_md_line_count:<6} {hook}")


@cli.command(name="show")
@_click.argument("name")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def show_cmd(ctx: _click.Context, name: str, json_output: bool) -> None:
    """Show details for a specific skill."""
    settings = _settings(ctx)
    registry = skills.SkillRegistry(settings.skills_dir)

    try:
        skill = registry.get_skill(name)
    except EXPECTED_ERRORS as e:
        _fail(e, json_output)

    if skill is None:
        if json_output:
            _click.echo(_json.dumps({"error": f"Skill not found: {name}"}))
        else:
            _click.echo(f"Error: Skill '{name}' not found", err=True)
        raise SystemExit(constants.EXIT_FAILURE)

    data = skill.to_dict()
    if json_output:
        _click.echo(_json.dumps(data, indent=2))
        return

    _click.echo(f"Skill: {skill.name}")
    _click.echo(f"  Path: {skill.path}")
    if data.get("kind"):
        _click.echo(f"  Kind: {data['kind']}")
    if data.get("version"):
        _click.echo(f"  Version: {data['version']}")
    if data.get("description"):
        _click.echo(f"  Description: {data['description']}")
    _click.echo(f"  Files: {', '.join(data['files'])}")
    _click.echo(f"  SKILL.md lines: {data['skill_md_lines']}")
    if data.get("user_invocable"):
        _click.echo(f"  Invocable: /{skill.name}")
    if data.get("allowed_tools"):
        _click.echo(f"  Allowed tools: {', '.join(data['allowed_tools'])}")
    for command in data.get("stop_hooks", []):
        _click.echo(f"  Stop hook: {command}")
    if data.get("references"):
        _click.echo(f"  References: {', '.join(data['references'])}")
    for error in data.get("errors", []):
        _click.echo(f"  Error: {error}")


# =============================================================================
# Audit Commands
# =============================================================================


@cli.command(name="audit")
@_click.option("--strict", is_flag=True, help="Treat warnings as errors")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def audit_cmd(ctx: _click.Context, strict: bool, json_output: bool) -> None:
    """Audit skills against the multi-YAML pattern.

    Checks kinds, required files, Stop hooks, collaboration references,
    naming, descriptions and CLAUDE.md documentation.
    """
    settings = _settings(ctx)
    auditor = audit.SkillAuditor(
        settings.skills_dir, settings.audit, claude_md=settings.claude_md_path
    )

    try:
        report = auditor.run(strict=strict)
    except EXPECTED_ERRORS as e:
        _fail(e, json_output)

    if json_output:
        _click.echo(_json.dumps(report.to_dict(strict=strict), indent=2))
        raise SystemExit(report.exit_code(strict))

    if report.warnings:
        _echo_findings("Warnings", report.warnings)

    if report.errors:
        _echo_findings("Errors", report.errors)
        raise SystemExit(constants.EXIT_FAILURE)

    if strict and report.warnings:
        _click.echo("Strict mode: treating warnings as errors")
        raise SystemExit(constants.EXIT_FAILURE)

    _click.echo(
        f"Audit passed: {report.checked} skill(s) checked, {len(report.warnings)} warning(s)"
    )


@cli.command(name="check")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def check_cmd(ctx: _click.Context, json_output: bool) -> None:
    """Check YAML validity and Stop hook wiring of every skill (for CI)."""
    settings = _settings(ctx)

    try:
        report = audit.check_structure(settings.skills_dir, settings.audit)
    except EXPECTED_ERRORS as e:
        _fail(e, json_output)

    if json_output:
        _click.echo(_json.dumps(report.to_dict(), indent=2))
        raise SystemExit(report.exit_code())

    if report.errors:
        _click.echo(f"Found {len(report.errors)} error(s):")
        for finding in report.errors:
            _click.echo(f"  - {finding}")
        raise SystemExit(constants.EXIT_FAILURE)

    _click.echo(f"All {report.checked} skill(s) valid")


@cli.command(name="validate")
@_click.option("--skill", "skill_name", required=True, help="Skill directory name")
@_click.option(
    "--mode",
    type=_click.Choice(list(validation.MODES)),
    default=validation.MODE_ON_STOP,
    show_default=True,
    help="on-stop runs the ids in on_stop; all runs every validation",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output (suppresses progress)")
@_click.option(
    "--timeout",
    type=float,
    default=None,
    help="Per-command timeout in seconds",
)
@_click.pass_context
def validate_cmd(
    ctx: _click.Context,
    skill_name: str,
    mode: str,
    json_output: bool,
    timeout: float | None,
) -> None:
    """Run the validations declared in a skill's validations.yaml."""
    settings = _settings(ctx)
    runner = validation.ValidationRunner(
        settings.skills_dir,
        settings.project_root,
        echo=None if json_output else _click.echo,
        timeout=timeout,
    )

    try:
        run = runner.run(skill_name, mode)
    except EXPECTED_ERRORS as e:
        _fail(e, json_output)

    if json_output:
        _click.echo(_json.dumps(run.to_dict(), indent=2))
    raise SystemExit(run.exit_code)


# =============================================================================
# Config Commands
# =============================================================================


@_click.command(name="config")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def config_cmd(ctx: _click.Context, json_output: bool) -> None:
    """Show the effective configuration."""
    settings = _settings(ctx)
    data = settings.to_dict()

    if json_output:
        _click.echo(_json.dumps(data, indent=2))
        return

    _click.echo("Skillkeeper Configuration:")
    _click.echo(f"  Project Root: {data['project_root']}")
    exists = "" if data["config_file_exists"] else " (not found)"
    _click.echo(f"  Config File: {data['config_file']}{exists}")
    _click.echo(f"  Skills Dir: {data['skills_dir']}")
    _click.echo(f"  CLAUDE.md: {data['claude_md']}")
    _click.echo(f"  Reference: {data['reference']}")
    _click.echo(f"  Valid Kinds: {', '.join(settings.audit.valid_kinds)}")
    _click.echo(f"  Skill Prefix: {settings.audit.skill_prefix or '(none)'}")
    _click.echo(f"  Stop Hook: {settings.audit.stop_hook_command}")
    for key, value in data["unknown_fields"].items():
        _click.echo(f"  Unknown field: {key} = {value!r}")


# Registered by name so the command does not shadow the config module
cli.add_command(config_cmd, name="config")


# =============================================================================
# Docs Commands
# =============================================================================


@cli.group(name="docs")
def docs_group() -> None:
    """Generate and check the skill documentation."""
    pass


@docs_group.command(name="reference")
@_click.pass_context
def docs_reference(ctx: _click.Context) -> None:
    """Regenerate the skills reference document."""
    settings = _settings(ctx)
    try:
        docs.generate_reference(
            settings.skills_dir,
            settings.reference_path,
            settings.docs,
            skills_dir_label=settings.paths.skills_dir,
        )
    except EXPECTED_ERRORS as e:
        _fail(e)


@docs_group.command(name="update-claude-md")
@_click.pass_context
def docs_update_claude_md(ctx: _click.Context) -> None:
    """Regenerate the skills table between the markers in CLAUDE.md."""
    settings = _settings(ctx)
    try:
        docs.update_claude_md(settings.skills_dir, settings.claude_md_path, settings.docs)
    except EXPECTED_ERRORS as e:
        _fail(e)


@docs_group.command(name="refresh")
@_click.pass_context
def docs_refresh(ctx: _click.Context) -> None:
    """Regenerate both the reference document and the CLAUDE.md table."""
    settings = _settings(ctx)
    try:
        docs.refresh_docs(
            settings.skills_dir,
            settings.reference_path,
            settings.claude_md_path,
            settings.docs,
            skills_dir_label=settings.paths.skills_dir,
        )
    except EXPECTED_ERRORS as e:
        _fail(e)


@docs_group.command(name="check")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def docs_check(ctx: _click.Context, json_output: bool) -> None:
    """Fail if the generated documents are out of sync (never writes)."""
    settings = _settings(ctx)
    try:
        report = docs.check_docs(
            settings.skills_dir,
            settings.reference_path,
            settings.claude_md_path,
            settings.docs,
            skills_dir_label=settings.paths.skills_dir,
        )
    except EXPECTED_ERRORS as e:
        _fail(e, json_output)

    if json_output:
        _click.echo(_json.dumps(report.to_dict(), indent=2))
        raise SystemExit(report.exit_code())

    for finding in report.errors:
        _click.echo(f"  - {finding}")

    if report.errors:
        _click.echo(f"{len(report.errors)} document(s) out of sync")
        raise SystemExit(constants.EXIT_FAILURE)

    _click.echo("All docs in sync")


@docs_group.command(name="lint")
@_click.option(
    "--file",
    "file_path",
    type=_click.Path(dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="File to lint (default: the configured CLAUDE.md)",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def docs_lint(ctx: _click.Context, file_path: _pathlib.Path | None, json_output: bool) -> None:
    """Lint CLAUDE.md for length, tree drawings, markers and headings."""
    settings = _settings(ctx)
    path = file_path or settings.claude_md_path

    try:
        report = docs.lint_claude_md(path, settings.docs)
    except EXPECTED_ERRORS as e:
        _fail(e, json_output)

    if json_output:
        _click.echo(_json.dumps(report.to_dict(), indent=2))
        raise SystemExit(report.exit_code())

    for finding in report.findings:
        label = "ERROR" if finding.severity is audit.Severity.ERROR else "WARN"
        _click.echo(f"{label}: {finding}")
    _click.echo(lint.summary(report))
    raise SystemExit(report.exit_code())


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="skillkeeper")


if __name__ == "__main__":
    main()
