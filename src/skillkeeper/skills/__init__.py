"""
Skill model for Skillkeeper.

A skill is a directory under `.claude/skills/` following the multi-YAML
pattern:
- SKILL.md - frontmatter plus thin pointers
- skill.yaml - canonical rules
- collaboration.yaml - dependencies, composition, triggers
- sharp-edges.yaml - pitfalls
- validations.yaml - optional commands run on Stop
"""

from skillkeeper.skills.discovery import (
    SkillDiscovery,
    SkillsDirectoryNotFoundError,
)
from skillkeeper.skills.documents import (
    AntiPattern,
    Collaboration,
    SharpEdge,
    SharpEdges,
    SkillFileError,
    SkillSpec,
    Validation,
    Validations,
    load_yaml_document,
)
from skillkeeper.skills.registry import SkillRegistry
from skillkeeper.skills.skill import (
    Skill,
    SkillFrontmatter,
    parse_frontmatter,
    parse_skill_markdown,
)

__all__ = [
    # Core
    "Skill",
    "SkillFrontmatter",
    "SkillFileError",
    # Documents
    "AntiPattern",
    "Collaboration",
    "SharpEdge",
    "SharpEdges",
    "SkillSpec",
    "Validation",
    "Validations",
    # Parsing
    "load_yaml_document",
    "parse_frontmatter",
    "parse_skill_markdown",
    # Discovery and Registry
    "SkillDiscovery",
    "SkillsDirectoryNotFoundError",
    "SkillRegistry",
]
