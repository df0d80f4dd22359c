"""RFP analyzer: fixed retrieval prompts + rule extraction + reports."""

import asyncio
import functools
import logging
from enum import Enum
from typing import Any, Optional

from ..exceptions import AnalysisFailed
from ..rag import SearchResult, VectorIndex
from . import reports, rules
from .models import (
    CompanyProfile,
    ContractRiskResult,
    EligibilityResult,
    RfpAnalysis,
    SubmissionRequirements,
)

logger = logging.getLogger(__name__)

ELIGIBILITY_QUERY = (
    "What are the mandatory eligibility requirements, certifications, "
    "and qualifications needed to bid on this RFP?"
)
SUBMISSION_QUERY = (
    "What are the submission requirements, document format, page limits, "
    "and deadlines for this RFP?"
)
CONTRACT_RISK_QUERY = (
    "What are the contract terms, conditions, and clauses that might put "
    "vendors at a disadvantage?"
)
OVERVIEW_QUERY = "What is the overall scope, purpose, and key requirements of this RFP?"

ANALYSIS_LIMIT = 10
OVERVIEW_LIMIT = 5


class QueryScope(str, Enum):
    """How retrieval queries are narrowed to one document."""

    PREFIX = "prefix"  # prepend the document id to the query text
    FILTER = "filter"  # metadata filter on document_id
    NONE = "none"


def scoped_query(query: str, document_id: Optional[str]) -> str:
    if not document_id:
        return query
    return f"For the RFP with ID {document_id}: {query}"


def apply_scope(
    query: str,
    document_id: Optional[str],
    scope: QueryScope,
) -> tuple[str, Optional[dict[str, Any]]]:
    """Narrow a retrieval to one document.

    Returns:
        The query text to embed and the metadata filter to search with
    """
    if document_id and scope is QueryScope.PREFIX:
        return scoped_query(query, document_id), None
    if document_id and scope is QueryScope.FILTER:
        return query, {"document_id": document_id}
    return query, None


def _report(name: str):
    """Wrap any failure inside an analysis as AnalysisFailed(name)."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except AnalysisFailed:
                raise
            except Exception as e:
                logger.error(f"Analysis '{name}' failed: {e}")
                raise AnalysisFailed(name, str(e)) from e

        return wrapper

    return decorator


class RfpAnalyzer:
    """Turns retrieved RFP chunks into eligibility, submission and risk reports.

    Every analysis issues its own similarity search; nothing is cached
    between calls, so each report can be regenerated independently.

    Example:
        ```python
        analyzer = RfpAnalyzer(index, CompanyProfile(company_name="Acme"))
        result = await analyzer.analyze_eligibility(document_id)
        print(result.eligible, result.missing_requirements)
        ```
    """

    def __init__(
        self,
        index: VectorIndex,
        company_profile: CompanyProfile,
        scope: QueryScope = QueryScope.PREFIX,
    ):
        """Initialize the analyzer.

        Args:
            index: Vector index holding the RFP chunks
            company_profile: Profile requirements are checked against
            scope: How queries are narrowed to the analyzed document
        """
        self.index = index
        self.company_profile = company_profile
        self.scope = QueryScope(scope)

    async def _retrieve(
        self,
        query: str,
        limit: int,
        document_id: Optional[str],
    ) -> list[SearchResult]:
        query, filter = apply_scope(query, document_id, self.scope)
        results = await self.index.similarity_search(query, limit=limit, filter=filter)
        logger.debug(f"Retrieved {len(results)} chunks for query: {query[:60]}")
        return results

    @staticmethod
    def _raw_text(results: list[SearchResult]) -> str:
        return "".join(result.content + "\n\n" for result in results)

    @_report("eligibility")
    async def analyze_eligibility(self, document_id: Optional[str]) -> EligibilityResult:
        """Check the company profile against the RFP's mandatory requirements."""
        results = await self._retrieve(ELIGIBILITY_QUERY, ANALYSIS_LIMIT, document_id)

        missing: list[str] = []
        for result in results:
            for requirement in rules.extract_requirements(result.content):
                if not rules.check_requirement_met(requirement, self.company_profile):
                    missing.append(requirement)
        missing = rules.dedupe(missing)
        eligible = not missing

        report = reports.render_eligibility_report(
            self.company_profile, eligible, missing, self._raw_text(results)
        )
        return EligibilityResult(
            eligible=eligible,
            missing_requirements=missing,
            eligibility_report=report,
        )

    @_report("submission")
    async def extract_submission_requirements(
        self, document_id: Optional[str]
    ) -> SubmissionRequirements:
        """Collect format, document and deadline requirements into a checklist."""
        results = await self._retrieve(SUBMISSION_QUERY, ANALYSIS_LIMIT, document_id)

        format_requirements: list[str] = []
        document_requirements: list[str] = []
        deadlines: list[str] = []
        for result in results:
            format_requirements.extend(rules.extract_format_requirements(result.content))
            document_requirements.extend(rules.extract_document_requirements(result.content))
            deadlines.extend(rules.extract_deadlines(result.content))

        format_requirements = rules.dedupe(format_requirements)
        document_requirements = rules.dedupe(document_requirements)
        deadlines = rules.dedupe(deadlines)

        return SubmissionRequirements(
            format_requirements=format_requirements,
            document_requirements=document_requirements,
            deadlines=deadlines,
            submission_checklist=reports.render_submission_checklist(
                format_requirements, document_requirements, deadlines
            ),
        )

    @_report("contract_risk")
    async def analyze_contract_risks(self, document_id: Optional[str]) -> ContractRiskResult:
        """Flag risky contract clauses and suggest modifications."""
        results = await self._retrieve(CONTRACT_RISK_QUERY, ANALYSIS_LIMIT, document_id)

        clauses: list[str] = []
        for result in results:
            clauses.extend(rules.extract_risky_clauses(result.content))
        clauses = rules.dedupe(clauses)

        modifications = {clause: rules.suggest_modification(clause) for clause in clauses}
        levels = {clause: rules.assess_risk_level(clause) for clause in clauses}

        return ContractRiskResult(
            risky_clauses=clauses,
            suggested_modifications=modifications,
            risk_levels=levels,
            risk_report=reports.render_risk_report(
                clauses, modifications, levels, self._raw_text(results)
            ),
        )

    async def _overview(self, document_id: Optional[str]) -> str:
        results = await self._retrieve(OVERVIEW_QUERY, OVERVIEW_LIMIT, document_id)
        return "\n\n".join(result.content for result in results)

    async def _run_all(self, document_id: Optional[str]):
        # Independent retrievals; composed only after all of them finish
        tasks = [
            asyncio.ensure_future(self._overview(document_id)),
            asyncio.ensure_future(self.analyze_eligibility(document_id)),
            asyncio.ensure_future(self.extract_submission_requirements(document_id)),
            asyncio.ensure_future(self.analyze_contract_risks(document_id)),
        ]
        try:
            return await asyncio.gather(*tasks)
        except Exception:
            # No sibling may keep running once the failure is reported
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    @_report("summary")
    async def generate_rfp_summary(self, document_id: Optional[str]) -> str:
        """Overview, eligibility verdict, checklist, risks and a recommendation."""
        overview, eligibility, submission, risk = await self._run_all(document_id)
        return reports.render_summary(
            overview,
            eligibility.eligible,
            eligibility.missing_requirements,
            submission.submission_checklist,
            risk.risk_report,
        )

    @_report("summary")
    async def analyze(self, document_id: str) -> RfpAnalysis:
        """Run every analysis once and return all reports together."""
        overview, eligibility, submission, risk = await self._run_all(document_id)
        summary = reports.render_summary(
            overview,
            eligibility.eligible,
            eligibility.missing_requirements,
            submission.submission_checklist,
            risk.risk_report,
        )
        logger.info(
            f"Analyzed RFP {document_id}: eligible={eligibility.eligible}, "
            f"{len(risk.risky_clauses)} risky clauses"
        )
        return RfpAnalysis(
            document_id=document_id,
            summary=summary,
            eligibility_report=eligibility.eligibility_report,
            submission_checklist=submission.submission_checklist,
            risk_report=risk.risk_report,
            eligible=eligibility.eligible,
            missing_requirements=eligibility.missing_requirements,
        )
