"""Company profile and analysis result structures."""

from enum import Enum

from pydantic import BaseModel, Field

from ..rag import SearchResult


class ExperienceArea(BaseModel):
    """Experience the company declares in one area."""
    years: float = 0
    description: str | None = None


class CompanyProfile(BaseModel):
    """What the bidding company brings, checked against RFP requirements."""
    company_name: str = ""
    certifications: list[str] = Field(default_factory=list)
    experience: dict[str, ExperienceArea] = Field(default_factory=dict)
    capabilities: list[str] = Field(default_factory=list)
    registrations: list[str] = Field(default_factory=list)


class RiskLevel(str, Enum):
    """Coarse risk classification of a contract clause."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class EligibilityResult(BaseModel):
    """Outcome of an eligibility analysis."""
    eligible: bool
    missing_requirements: list[str] = Field(default_factory=list)
    eligibility_report: str


class SubmissionRequirements(BaseModel):
    """Deduplicated submission requirements and the rendered checklist."""
    format_requirements: list[str] = Field(default_factory=list)
    document_requirements: list[str] = Field(default_factory=list)
    deadlines: list[str] = Field(default_factory=list)
    submission_checklist: str


class ContractRiskResult(BaseModel):
    """Risky clauses with suggested modifications and risk levels."""
    risky_clauses: list[str] = Field(default_factory=list)
    suggested_modifications: dict[str, str] = Field(default_factory=dict)
    risk_levels: dict[str, RiskLevel] = Field(default_factory=dict)
    risk_report: str


class RfpAnalysis(BaseModel):
    """Full analysis of one RFP."""
    document_id: str
    summary: str
    eligibility_report: str
    submission_checklist: str
    risk_report: str
    eligible: bool
    missing_requirements: list[str] = Field(default_factory=list)


class QuestionAnswer(BaseModel):
    """Retrieved chunks for a question plus the generated answer."""
    question: str
    results: list[SearchResult] = Field(default_factory=list)
    answer: str
