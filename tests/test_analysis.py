"""Tests for rule-based RFP analysis."""

import asyncio

import pytest

from rfpscope.analysis import (
    CompanyProfile,
    ExperienceArea,
    QueryScope,
    RfpAnalyzer,
    RiskLevel,
    assess_risk_level,
    check_requirement_met,
    extract_deadlines,
    extract_document_requirements,
    extract_format_requirements,
    extract_requirements,
    extract_risky_clauses,
    scoped_query,
    suggest_modification,
    summarize,
)
from rfpscope.analysis.analyzer import ELIGIBILITY_QUERY
from rfpscope.analysis.reports import FINAL_VERIFICATION_ITEMS
from rfpscope.exceptions import AnalysisFailed, RetrievalFailed
from rfpscope.rag import IndexItem, TextChunker, VectorIndex

TEN_YEARS_LINE = "2. Offerors must have 10 years experience delivering federal IT programs."
TERMINATION_CLAUSE = "The Government may terminate this contract without cause at any time."
WARRANTY_CLAUSE = "The Contractor shall provide a warranty of five years."
DAMAGES_CLAUSE = "liquidated damages apply to late delivery."


class SlowFailingIndex:
    """Fails the eligibility query at once; every other query takes 50 ms."""

    def __init__(self):
        self.finished = 0

    async def similarity_search(self, query, limit=5, filter=None):
        if ELIGIBILITY_QUERY in query:
            raise RetrievalFailed("eligibility query rejected")
        await asyncio.sleep(0.05)
        self.finished += 1
        return []


class TestRequirementRules:
    """Tests for requirement extraction and matching."""

    def test_extract_requirements(self, sample_rfp_text):
        """Test that bullets, numbered lines and requirement language qualify."""
        requirements = extract_requirements(sample_rfp_text)

        assert requirements == [
            "1. Offerors must have ISO 9001 certification.",
            TEN_YEARS_LINE,
            "- Demonstrated Cloud migration capability is required.",
        ]

    def test_short_lines_ignored(self):
        """Test that lines of 10 characters or fewer are dropped."""
        assert extract_requirements("- a\n1. b\nrequired") == []

    def test_certification_requirement(self, company_profile):
        assert check_requirement_met("Must hold ISO 9001 certification", company_profile)
        assert not check_requirement_met("Must hold CMMI Level 3 certification", company_profile)

    def test_experience_requirement(self, company_profile):
        assert check_requirement_met("Minimum 5 years of experience in IT", company_profile)
        assert not check_requirement_met("At least 6 years experience required", company_profile)

    def test_capability_requirement(self, company_profile):
        assert check_requirement_met("Offeror must have cloud hosting capacity", company_profile)
        assert not check_requirement_met("Offeror must have mainframe support", company_profile)

    def test_blank_profile_entries_never_match(self):
        """Test that empty strings in the profile do not match everything."""
        profile = CompanyProfile(certifications=[""], capabilities=["  "])

        assert not check_requirement_met("Required certification: anything", profile)
        assert not check_requirement_met("Offeror must have anything", profile)

    def test_eligibility_is_deterministic(self, company_profile):
        """Test that the same lines and profile give the same verdict."""
        lines = extract_requirements("- Bidders must have 3 years experience in IT")

        verdicts = {
            all(check_requirement_met(line, company_profile) for line in lines)
            for _ in range(5)
        }

        assert verdicts == {True}


class TestSubmissionRules:
    """Tests for submission requirement extraction."""

    def test_format_requirements(self, sample_rfp_text):
        assert extract_format_requirements(sample_rfp_text) == [
            "Proposals are limited to 30 pages in 12 point font with 1 inch margins."
        ]

    def test_format_needs_formatting_context(self):
        """Test that layout words alone do not make a chunk a format requirement."""
        text = "The page header lists the contract size.\nSee page 4 for the footer."

        assert extract_format_requirements(text) == []
        assert extract_format_requirements(text + "\nUse 1 inch margins.") == [
            "The page header lists the contract size.",
            "See page 4 for the footer.",
            "Use 1 inch margins.",
        ]

    def test_document_requirements(self, sample_rfp_text):
        documents = extract_document_requirements(sample_rfp_text)

        assert "Submit the signed cover letter and attach Form SF-33." in documents
        assert "Proposals are limited to 30 pages in 12 point font with 1 inch margins." not in documents

    def test_deadlines_need_a_date(self, sample_rfp_text):
        """Test that deadline lines must contain a date."""
        deadlines = extract_deadlines(sample_rfp_text)

        assert "Proposals are due by March 15, 2025 at 2:00 PM EST." in deadlines
        assert "Questions must be received before 02/01/2025." in deadlines
        assert extract_deadlines("Proposals are due soon.") == []


class TestRiskRules:
    """Tests for contract risk heuristics."""

    def test_extract_risky_clauses(self, sample_rfp_text):
        assert extract_risky_clauses(sample_rfp_text) == [
            TERMINATION_CLAUSE,
            WARRANTY_CLAUSE,
            DAMAGES_CLAUSE,
        ]

    def test_every_flag_contains_a_term(self):
        """Test that every flagged clause mentions a risk term."""
        text = (
            "Payment is due within thirty days. The vendor waives all claims for delay; "
            "the agency may act at its sole discretion. Meetings are held weekly."
        )

        clauses = extract_risky_clauses(text)

        assert clauses == [
            "The vendor waives all claims for delay.",
            "the agency may act at its sole discretion.",
        ]

    def test_short_clauses_dropped(self):
        assert extract_risky_clauses("Warranty applies. Penalties.") == []

    def test_duplicates_removed(self):
        text = "Vendor shall indemnify under indemnification terms. " * 3

        assert len(extract_risky_clauses(text)) == 1

    def test_risk_levels(self):
        assert assess_risk_level(TERMINATION_CLAUSE) is RiskLevel.HIGH
        assert assess_risk_level("Vendor accepts unlimited liability.") is RiskLevel.HIGH
        assert assess_risk_level(WARRANTY_CLAUSE) is RiskLevel.MEDIUM
        assert assess_risk_level("The contract may be terminated for default.") is RiskLevel.MEDIUM
        assert assess_risk_level("Remedies are exclusive to the agency.") is RiskLevel.LOW

    def test_suggestions(self):
        assert suggest_modification(TERMINATION_CLAUSE).startswith(
            "Add requirement for reasonable notice period"
        )
        assert suggest_modification("Changes are made at the sole discretion of the agency.") == (
            "Request mutual agreement language or objective criteria for decisions."
        )
        assert suggest_modification(WARRANTY_CLAUSE).startswith("Clarify warranty scope")
        assert suggest_modification(DAMAGES_CLAUSE).startswith("Request reduction in amounts")
        assert suggest_modification("Remedies are exclusive to the agency.") == (
            "Request clarification or modification to balance rights between parties."
        )


class TestSummarize:
    """Tests for text truncation."""

    def test_short_text_unchanged(self):
        assert summarize("Short.", 500) == "Short."

    def test_cuts_at_late_period(self):
        text = ("x" * 79 + ".") * 10

        summary = summarize(text, 500)

        assert summary == text[:480] + " [...]"

    def test_hard_cut_without_period(self):
        summary = summarize("a" * 1000, 500)

        assert summary == "a" * 500 + " [...]"


class TestScopedQuery:
    def test_prefix(self):
        assert scoped_query("What is due?", "abc") == "For the RFP with ID abc: What is due?"

    def test_no_document(self):
        assert scoped_query("What is due?", None) == "What is due?"


class TestRfpAnalyzer:
    """Tests for the analyzer over an in-memory index."""

    @pytest.mark.asyncio
    async def test_eligibility(self, index, company_profile, sample_rfp_text):
        """Test that only the unmet requirement is reported missing."""
        await index.add_documents([
            IndexItem(id="rfp-1-chunk-0", content=sample_rfp_text, metadata={"document_id": "rfp-1"}),
        ])
        analyzer = RfpAnalyzer(index, company_profile)

        result = await analyzer.analyze_eligibility("rfp-1")

        assert result.eligible is False
        assert result.missing_requirements == [TEN_YEARS_LINE]
        assert "## Overall Assessment: NOT ELIGIBLE" in result.eligibility_report
        assert "- IT: 5 years" in result.eligibility_report

    @pytest.mark.asyncio
    async def test_compliant_document(self, index, company_profile, compliant_rfp_text):
        """Test that a profile meeting every requirement is eligible."""
        chunks = TextChunker().chunk("rfp-ok", compliant_rfp_text, {"title": "Compliant"})
        await index.add_documents([IndexItem.from_chunk(c) for c in chunks])
        analyzer = RfpAnalyzer(index, company_profile)

        result = await analyzer.analyze_eligibility("rfp-ok")

        assert len(chunks) == 3
        assert result.eligible is True
        assert result.missing_requirements == []
        assert "All requirements appear to be met" in result.eligibility_report

    @pytest.mark.asyncio
    async def test_missing_requirements_deduplicated(self, index, company_profile):
        """Test that the same missing line in two chunks is reported once."""
        line = "- Offerors must have Top Secret facility clearance on file."
        await index.add_documents([
            IndexItem(id="a", content=line, metadata={"document_id": "d"}),
            IndexItem(id="b", content=f"Scope of work\n{line}", metadata={"document_id": "d"}),
        ])

        result = await RfpAnalyzer(index, company_profile).analyze_eligibility("d")

        assert result.missing_requirements == [line]

    @pytest.mark.asyncio
    async def test_submission(self, index, company_profile, sample_rfp_text):
        await index.add_documents([
            IndexItem(id="c0", content=sample_rfp_text, metadata={"document_id": "rfp-1"}),
        ])

        result = await RfpAnalyzer(index, company_profile).extract_submission_requirements("rfp-1")

        assert result.format_requirements == [
            "Proposals are limited to 30 pages in 12 point font with 1 inch margins."
        ]
        assert "- [ ] Proposals are due by March 15, 2025 at 2:00 PM EST." in result.submission_checklist
        assert "## Final Verification" in result.submission_checklist
        for item in FINAL_VERIFICATION_ITEMS:
            assert f"- [ ] {item}" in result.submission_checklist

    @pytest.mark.asyncio
    async def test_contract_risks(self, index, company_profile, sample_rfp_text):
        await index.add_documents([
            IndexItem(id="c0", content=sample_rfp_text, metadata={"document_id": "rfp-1"}),
        ])

        result = await RfpAnalyzer(index, company_profile).analyze_contract_risks("rfp-1")

        assert result.risky_clauses == [TERMINATION_CLAUSE, WARRANTY_CLAUSE, DAMAGES_CLAUSE]
        assert result.risk_levels[TERMINATION_CLAUSE] is RiskLevel.HIGH
        assert result.risk_levels[WARRANTY_CLAUSE] is RiskLevel.MEDIUM
        assert "**Risk Level:** High" in result.risk_report
        assert "## General Recommendations" in result.risk_report

    @pytest.mark.asyncio
    async def test_no_risks(self, index, company_profile):
        await index.add_documents([
            IndexItem(id="c0", content="The agency seeks help desk support.", metadata={}),
        ])

        result = await RfpAnalyzer(index, company_profile).analyze_contract_risks(None)

        assert result.risky_clauses == []
        assert "No significant contract risks identified" in result.risk_report

    @pytest.mark.asyncio
    async def test_summary(self, index, company_profile, sample_rfp_text):
        await index.add_documents([
            IndexItem(id="c0", content=sample_rfp_text, metadata={"document_id": "rfp-1"}),
        ])

        summary = await RfpAnalyzer(index, company_profile).generate_rfp_summary("rfp-1")

        assert summary.startswith("# RFP Analysis Summary")
        assert "**Overall Eligibility:** Not eligible to bid" in summary
        assert "**NOT proceed with bidding**" in summary
        assert "# RFP Submission Checklist" in summary

    @pytest.mark.asyncio
    async def test_analyze(self, index, company_profile, compliant_rfp_text):
        """Test that analyze() returns every report for one document."""
        chunks = TextChunker().chunk("rfp-ok", compliant_rfp_text, {})
        await index.add_documents([IndexItem.from_chunk(c) for c in chunks])

        analysis = await RfpAnalyzer(index, company_profile).analyze("rfp-ok")

        assert analysis.document_id == "rfp-ok"
        assert analysis.eligible is True
        assert "**proceed with bidding**" in analysis.summary
        assert analysis.eligibility_report.startswith("# Eligibility Analysis Report")
        assert analysis.submission_checklist.startswith("# RFP Submission Checklist")
        assert analysis.risk_report.startswith("# Contract Risk Analysis Report")

    @pytest.mark.asyncio
    async def test_empty_index(self, index, company_profile):
        """Test reports over an empty collection."""
        analyzer = RfpAnalyzer(index, company_profile)

        eligibility = await analyzer.analyze_eligibility("missing")
        summary = await analyzer.generate_rfp_summary("missing")

        assert eligibility.eligible is True
        assert "No specific eligibility requirements found in the RFP." in eligibility.eligibility_report
        assert "No overview information found." in summary

    @pytest.mark.asyncio
    async def test_uninitialized_index(self, embedding, store, company_profile):
        """Test that retrieval errors surface as AnalysisFailed with the report name."""
        analyzer = RfpAnalyzer(VectorIndex(embedding, store), company_profile)

        with pytest.raises(AnalysisFailed) as exc_info:
            await analyzer.analyze_eligibility("rfp-1")
        assert exc_info.value.report == "eligibility"

        with pytest.raises(AnalysisFailed):
            await analyzer.analyze("rfp-1")

    @pytest.mark.asyncio
    async def test_filter_scope(self, index, sample_rfp_text):
        """Test that filter scoping ignores other documents."""
        profile = CompanyProfile(
            certifications=["ISO 9001"],
            experience={"IT": ExperienceArea(years=12)},
            capabilities=["Cloud"],
        )
        other = "- Offerors must have 20 years experience in launch vehicles."
        await index.add_documents([
            IndexItem(id="a", content=sample_rfp_text, metadata={"document_id": "rfp-1"}),
            IndexItem(id="b", content=other, metadata={"document_id": "rfp-2"}),
        ])

        scoped = await RfpAnalyzer(index, profile, scope=QueryScope.FILTER).analyze_eligibility("rfp-1")
        unscoped = await RfpAnalyzer(index, profile, scope=QueryScope.NONE).analyze_eligibility("rfp-1")

        assert scoped.eligible is True
        assert unscoped.missing_requirements == [other]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["analyze", "generate_rfp_summary"])
    async def test_failure_cancels_sibling_retrievals(self, company_profile, operation):
        """Test that no retrieval is still running once the failure is raised."""
        index = SlowFailingIndex()
        analyzer = RfpAnalyzer(index, company_profile)

        with pytest.raises(AnalysisFailed) as exc_info:
            await getattr(analyzer, operation)("rfp-1")

        assert exc_info.value.report == "eligibility"
        assert index.finished == 0
        await asyncio.sleep(0.1)
        assert index.finished == 0
