"""Rule-based extractors applied to retrieved RFP text.

These are keyword heuristics, not language understanding: each rule looks
at one line (or one sentence, for contract clauses) at a time and decides
from fixed keyword lists.
"""

import re

from .models import CompanyProfile, RiskLevel

MIN_REQUIREMENT_LENGTH = 10
MIN_CLAUSE_LENGTH = 20

_BULLET = re.compile(r"^[•\-*]")
_NUMBERED = re.compile(r"^\d+[.)]")
_REQUIREMENT_LANGUAGE = re.compile(r"must have|required|shall have|minimum|at least", re.IGNORECASE)
_YEARS_EXPERIENCE = re.compile(r"(\d+)\s+years?\s+(?:of\s+)?experience", re.IGNORECASE)

_FORMAT_GATE = re.compile(r"page limit|font size|margin|spacing|format|template", re.IGNORECASE)
_FORMAT_KEYWORDS = re.compile(
    r"page|font|margin|spacing|format|template|size|header|footer", re.IGNORECASE
)
_DOCUMENT_KEYWORDS = re.compile(
    r"submit|include|attach|provide|form|document|certificate", re.IGNORECASE
)
_DEADLINE_KEYWORDS = re.compile(r"due|deadline|by|before|date|schedule", re.IGNORECASE)
_NUMERIC_DATE = re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}")
_MONTH_NAME = re.compile(
    r"\b(January|February|March|April|May|June|July|August|September|October|November|December)\b",
    re.IGNORECASE,
)

_CLAUSE_SPLIT = re.compile(r"[.;]\s+")

RISK_TERMS = [
    "termination",
    "unilateral",
    "waive",
    "without cause",
    "sole discretion",
    "unlimited liability",
    "indemnification",
    "warranty",
    "liquidated damages",
    "penalties",
    "remedy",
    "exclusive",
    "limitation of liability",
]
HIGH_RISK_TERMS = ["unlimited liability", "indemnification", "without cause", "sole discretion"]
MEDIUM_RISK_TERMS = ["termination", "warranty", "liquidated damages", "penalties"]

# "termination" also covers terminate/terminated/terminates/terminating
_TERM_PATTERNS = {
    term: re.compile(re.escape(term), re.IGNORECASE) for term in RISK_TERMS
}
_TERM_PATTERNS["termination"] = re.compile(r"terminat(?:ion|e[sd]?|ing)", re.IGNORECASE)

DEFAULT_SUGGESTION = "Request clarification or modification to balance rights between parties."
_SUGGESTIONS = [
    (("termination",),
     "Add requirement for reasonable notice period (e.g., 30 days) before termination."),
    (("unilateral", "sole discretion"),
     "Request mutual agreement language or objective criteria for decisions."),
    (("unlimited liability", "indemnification"),
     "Request cap on liability proportional to contract value."),
    (("warranty",),
     "Clarify warranty scope and limit duration to reasonable period."),
    (("liquidated damages", "penalties"),
     "Request reduction in amounts and/or grace period for cure."),
]


def mentions(text: str, term: str) -> bool:
    """Case-insensitive check for a risk term in ``text``."""
    pattern = _TERM_PATTERNS.get(term)
    if pattern is None:
        return term.lower() in text.lower()
    return pattern.search(text) is not None


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def dedupe(items: list[str]) -> list[str]:
    """Remove duplicates, keeping first occurrences in order."""
    return list(dict.fromkeys(items))


def extract_requirements(text: str) -> list[str]:
    """Pull candidate requirement lines out of a chunk.

    A line qualifies if it starts with a bullet or a list number, or uses
    requirement language, and is longer than 10 characters.
    """
    requirements = []
    for line in _lines(text):
        if (
            _BULLET.match(line)
            or _NUMBERED.match(line)
            or _REQUIREMENT_LANGUAGE.search(line)
        ):
            if len(line) > MIN_REQUIREMENT_LENGTH:
                requirements.append(line)
    return requirements


def check_requirement_met(requirement: str, profile: CompanyProfile) -> bool:
    """Decide whether the company profile satisfies one requirement line.

    Certification requirements need a matching certification, "N years
    experience" requirements need an experience area with at least N years,
    anything else needs a matching capability.
    """
    lowered = requirement.lower()

    if "certification" in lowered or "certified" in lowered:
        return any(
            cert.strip() and cert.lower() in lowered
            for cert in profile.certifications
        )

    match = _YEARS_EXPERIENCE.search(requirement)
    if match:
        years_required = int(match.group(1))
        return any(area.years >= years_required for area in profile.experience.values())

    return any(
        capability.strip() and capability.lower() in lowered
        for capability in profile.capabilities
    )


def extract_format_requirements(text: str) -> list[str]:
    """Format lines of a chunk that talks about formatting at all.

    Lines with a layout keyword are only collected when the chunk as a
    whole matches a formatting term such as "page limit" or "margin".
    """
    if not _FORMAT_GATE.search(text):
        return []
    return [line for line in _lines(text) if _FORMAT_KEYWORDS.search(line)]


def extract_document_requirements(text: str) -> list[str]:
    return [line for line in _lines(text) if _DOCUMENT_KEYWORDS.search(line)]


def extract_deadlines(text: str) -> list[str]:
    """Lines that talk about dates and actually contain one."""
    return [
        line for line in _lines(text)
        if _DEADLINE_KEYWORDS.search(line)
        and (_NUMERIC_DATE.search(line) or _MONTH_NAME.search(line))
    ]


def extract_risky_clauses(text: str) -> list[str]:
    """Sentences containing a risk term, one flag per sentence."""
    clauses: list[str] = []
    for section in _CLAUSE_SPLIT.split(text):
        for term in RISK_TERMS:
            if mentions(section, term):
                clause = section.strip().rstrip(".;") + "."
                if len(clause) > MIN_CLAUSE_LENGTH and clause not in clauses:
                    clauses.append(clause)
                break
    return clauses


def suggest_modification(clause: str) -> str:
    """Negotiation suggestion for a risky clause; first matching rule wins."""
    for terms, suggestion in _SUGGESTIONS:
        if any(mentions(clause, term) for term in terms):
            return suggestion
    return DEFAULT_SUGGESTION


def assess_risk_level(clause: str) -> RiskLevel:
    if any(mentions(clause, term) for term in HIGH_RISK_TERMS):
        return RiskLevel.HIGH
    if any(mentions(clause, term) for term in MEDIUM_RISK_TERMS):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def summarize(text: str, max_length: int) -> str:
    """Truncate text to roughly ``max_length`` characters.

    Cuts at the last period when one falls in the final 30% of the window,
    and marks the cut with " [...]".
    """
    if len(text) <= max_length:
        return text

    summary = text[:max_length]
    last_period = summary.rfind(".")
    if last_period > max_length * 0.7:
        summary = summary[: last_period + 1]

    return summary + " [...]"
