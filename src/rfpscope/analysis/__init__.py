"""Rule-based RFP analysis on top of retrieval results."""

from .models import (
    CompanyProfile,
    ContractRiskResult,
    EligibilityResult,
    ExperienceArea,
    QuestionAnswer,
    RfpAnalysis,
    RiskLevel,
    SubmissionRequirements,
)
from .rules import (
    assess_risk_level,
    check_requirement_met,
    extract_deadlines,
    extract_document_requirements,
    extract_format_requirements,
    extract_requirements,
    extract_risky_clauses,
    suggest_modification,
    summarize,
)
from .analyzer import QueryScope, RfpAnalyzer, apply_scope, scoped_query

__all__ = [
    # Models
    "CompanyProfile",
    "ContractRiskResult",
    "EligibilityResult",
    "ExperienceArea",
    "QuestionAnswer",
    "RfpAnalysis",
    "RiskLevel",
    "SubmissionRequirements",
    # Rules
    "assess_risk_level",
    "check_requirement_met",
    "extract_deadlines",
    "extract_document_requirements",
    "extract_format_requirements",
    "extract_requirements",
    "extract_risky_clauses",
    "suggest_modification",
    "summarize",
    # Analyzer
    "QueryScope",
    "RfpAnalyzer",
    "apply_scope",
    "scoped_query",
]
