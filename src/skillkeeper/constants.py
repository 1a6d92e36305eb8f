"""
Shared constants for Skillkeeper.

This module provides a single source of truth for file names, limits
and default values that are used across multiple modules.
"""

# Skill file names
SKILL_MD = "SKILL.md"
"""Thin pointer document with YAML frontmatter."""

SKILL_YAML = "skill.yaml"
"""Canonical rules document."""

COLLABORATION_YAML = "collaboration.yaml"
"""Dependencies, composition sequences and trigger suggestions."""

SHARP_EDGES_YAML = "sharp-edges.yaml"
"""Common pitfalls with detection hints and fixes."""

VALIDATIONS_YAML = "validations.yaml"
"""Optional per-skill validation commands."""

SKILL_YAML_FILES = (SKILL_YAML, VALIDATIONS_YAML, SHARP_EDGES_YAML, COLLABORATION_YAML)
"""YAML files that must parse when present."""

# Default project layout
DEFAULT_SKILLS_DIR = ".claude/skills"
DEFAULT_CLAUDE_MD = "CLAUDE.md"
DEFAULT_REFERENCE = "docs/skills/REFERENCE.md"
PROJECT_CONFIG_FILE = ".skillkeeper.yaml"

# Skill kinds
DEFAULT_VALID_KINDS = ["gate", "scaffolder", "helper", "frontend", "meta"]
"""Kinds accepted by the auditor."""

HELPER_KIND = "helper"

FULL_KIT_KINDS = frozenset({"gate", "scaffolder", "meta", "frontend"})
"""Kinds that must ship all four canonical files."""

PROCEDURE_KINDS = frozenset({"gate", "scaffolder", "meta"})
"""Kinds expected to carry a procedure section in skill.yaml."""

PROCEDURE_FIELDS = ("procedure", "analysis_procedure", "scaffolding_procedure")

DEFAULT_KIND_ORDER = [
    "action",
    "workflow",
    "methodology",
    "gate",
    "scaffolder",
    "frontend",
    "helper",
    "utility",
    "meta",
    "integration",
]
"""Display order of kinds in generated documentation."""

KIND_LABELS = {
    "action": "Actions",
    "workflow": "Workflows",
    "methodology": "Methodologies",
    "gate": "Gates",
    "scaffolder": "Scaffolders",
    "frontend": "Frontend",
    "helper": "Helpers",
    "utility": "Utilities",
    "meta": "Meta",
    "integration": "Integrations",
}

KIND_DESCRIPTIONS = {
    "action": "Single-purpose automation skills",
    "workflow": "Multi-step development lifecycle skills",
    "methodology": "Structured approach and process skills",
    "gate": "Pre-requisite checker skills",
    "scaffolder": "Skills that generate project structure",
    "frontend": "User interface development skills",
    "helper": "Utility skills (no Stop hook required)",
    "utility": "Small operational helpers",
    "meta": "Skills for managing other skills",
    "integration": "External service connector skills",
}

# Naming and length limits
DEFAULT_NAME_MAX_LENGTH = 64
DEFAULT_DESCRIPTION_MAX_LENGTH = 200
DEFAULT_SKILL_MD_MAX_LINES = 100

NAME_PATTERN = r"^[a-z][a-z0-9_-]*$"
"""Lowercase letters, digits, hyphens and underscores; must start with a letter."""

DEFAULT_RESERVED_NAMES = [
    "help",
    "config",
    "settings",
    "permissions",
    "doctor",
    "clear",
    "compact",
    "context",
    "cost",
    "init",
    "listen",
    "login",
    "logout",
    "mcp",
    "memory",
    "model",
    "pr-comments",
    "resume",
    "review",
    "terminal-setup",
    "vim",
    "bug",
    "ide",
]
"""Names of built-in assistant commands that skills may not shadow."""

DEFAULT_STOP_HOOK_COMMAND = "task claude:validate-skill -- --skill {skill}"
"""Command every non-helper Stop hook must call ({skill} is the directory name)."""

# Generated documentation
TABLE_START_MARKER = "<!-- SKILLS_TABLE_START -->"
TABLE_END_MARKER = "<!-- SKILLS_TABLE_END -->"

DEFAULT_TABLE_DESCRIPTION_MAX = 80
DEFAULT_REGENERATE_COMMAND = "skillkeeper docs refresh"

# CLAUDE.md lint
DEFAULT_CLAUDE_MD_MAX_LINES = 120
DEFAULT_BUILT_WITH_SCAN_LINES = 15
DEFAULT_BANNED_HEADINGS = ["Customizing", "Getting Started", "Contributing", "Installation"]
TREE_CHARACTERS = "├└│"

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
