"""
Skill auditing.

Two passes over the skills directory:
- SkillAuditor: semantic rules per skill kind (`skillkeeper audit`)
- StructureChecker: YAML validity and Stop hook wiring (`skillkeeper check`)
"""

from skillkeeper.audit.auditor import SkillAuditor, audit_skills
from skillkeeper.audit.report import AuditReport, Finding, Severity
from skillkeeper.audit.structure import StructureChecker, check_structure

__all__ = [
    "AuditReport",
    "Finding",
    "Severity",
    "SkillAuditor",
    "StructureChecker",
    "audit_skills",
    "check_structure",
]
