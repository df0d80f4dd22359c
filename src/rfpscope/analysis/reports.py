"""Markdown rendering of analysis findings."""

from .models import CompanyProfile, RiskLevel
from .rules import summarize

FINAL_VERIFICATION_ITEMS = [
    "All forms completely filled out",
    "All required signatures included",
    "Correct number of copies prepared",
    "Proposal properly sealed and marked",
    "Delivery method arranged for on-time submission",
]

GENERAL_RISK_RECOMMENDATIONS = [
    "Perform a detailed legal review of all contract terms",
    "Request clarification on any ambiguous language",
    "Negotiate modification of high-risk clauses before submission",
    "Document all assumptions in your proposal",
]

NO_ELIGIBILITY_TEXT = "No specific eligibility requirements found in the RFP."
DEFAULT_MODIFICATION = "Request clarification or modification."


def _bullets(items: list[str], empty: str, checkbox: bool = False) -> str:
    marker = "- [ ] " if checkbox else "- "
    if not items:
        return f"{marker}{empty}\n"
    return "".join(f"{marker}{item}\n" for item in items)


def _format_years(years: float) -> str:
    return str(int(years)) if float(years).is_integer() else str(years)


def render_eligibility_report(
    profile: CompanyProfile,
    eligible: bool,
    missing_requirements: list[str],
    analysis_text: str,
) -> str:
    report = "# Eligibility Analysis Report\n\n"
    report += f"## Overall Assessment: {'ELIGIBLE' if eligible else 'NOT ELIGIBLE'}\n\n"

    report += "## Company Qualifications\n\n"
    report += f"Company Name: {profile.company_name}\n\n"

    report += "### Certifications\n"
    report += _bullets(profile.certifications, "No certifications provided")

    report += "\n### Experience\n"
    report += _bullets(
        [f"{area}: {_format_years(details.years)} years" for area, details in profile.experience.items()],
        "No experience provided",
    )

    report += "\n### Capabilities\n"
    report += _bullets(profile.capabilities, "No capabilities provided")

    report += "\n## RFP Requirements Analysis\n\n"
    if missing_requirements:
        report += "### Missing Requirements\n\n"
        report += _bullets(missing_requirements, "")
    else:
        report += "All requirements appear to be met based on available information.\n"

    report += "\n## Raw Analysis\n\n"
    report += analysis_text or NO_ELIGIBILITY_TEXT

    return report


def render_submission_checklist(
    format_requirements: list[str],
    document_requirements: list[str],
    deadlines: list[str],
) -> str:
    checklist = "# RFP Submission Checklist\n\n"

    checklist += "## Important Deadlines\n\n"
    checklist += _bullets(
        deadlines, "No specific deadlines found - verify due date in the RFP", checkbox=True
    )

    checklist += "\n## Format Requirements\n\n"
    checklist += _bullets(
        format_requirements,
        "No specific format requirements found - check the RFP for details",
        checkbox=True,
    )

    checklist += "\n## Required Documents\n\n"
    checklist += _bullets(
        document_requirements,
        "No specific document requirements found - check the RFP for details",
        checkbox=True,
    )

    checklist += "\n## Final Verification\n\n"
    checklist += _bullets(FINAL_VERIFICATION_ITEMS, "", checkbox=True)

    return checklist


def render_risk_report(
    risky_clauses: list[str],
    modifications: dict[str, str],
    risk_levels: dict[str, RiskLevel],
    analysis_text: str,
) -> str:
    report = "# Contract Risk Analysis Report\n\n"

    if risky_clauses:
        report += "## Identified Risky Clauses\n\n"
        for index, clause in enumerate(risky_clauses, start=1):
            report += f"### Risk {index}\n\n"
            report += f"**Clause:** {clause}\n\n"
            report += f"**Suggested Modification:** {modifications.get(clause, DEFAULT_MODIFICATION)}\n\n"
            level = risk_levels.get(clause, RiskLevel.LOW)
            report += f"**Risk Level:** {level.value}\n\n"
    else:
        report += "No significant contract risks identified based on available information.\n\n"

    report += "## General Recommendations\n\n"
    report += "".join(
        f"{index}. {item}\n" for index, item in enumerate(GENERAL_RISK_RECOMMENDATIONS, start=1)
    )
    report += "\n## Raw Analysis\n\n"
    report += analysis_text

    return report


def render_summary(
    overview_text: str,
    eligible: bool,
    missing_requirements: list[str],
    submission_checklist: str,
    risk_report: str,
) -> str:
    """Compose the overall RFP summary from the individual reports."""
    summary = "# RFP Analysis Summary\n\n"

    summary += "## Overview\n\n"
    if overview_text:
        summary += summarize(overview_text, 500) + "\n\n"
    else:
        summary += "No overview information found.\n\n"

    summary += "## Eligibility Assessment\n\n"
    summary += f"**Overall Eligibility:** {'Eligible to bid' if eligible else 'Not eligible to bid'}\n\n"
    if missing_requirements:
        summary += "**Missing Requirements:**\n\n"
        summary += _bullets(missing_requirements, "")
        summary += "\n"
    elif not eligible:
        summary += "**Missing Requirements:** Specific requirements could not be determined.\n\n"
    else:
        summary += "**All requirements met.**\n\n"

    summary += "## Submission Requirements\n\n"
    summary += submission_checklist + "\n\n"

    summary += "## Contract Risk Analysis\n\n"
    summary += summarize(risk_report, 500) + "\n\n"

    summary += "## Recommendation\n\n"
    if eligible:
        summary += (
            "Based on the analysis, it is recommended to **proceed with bidding** on this RFP. "
            "Company meets all the eligibility criteria.\n\n"
        )
    else:
        summary += (
            "Based on the analysis, it is recommended to **NOT proceed with bidding** on this RFP "
            "due to missing requirements.\n\n"
        )

    return summary
