"""
Test configuration and fixtures.
"""

import pytest
import pytest_asyncio

from rfpscope.analysis import CompanyProfile, ExperienceArea
from rfpscope.rag import HashEmbedding, MemoryVectorStore, RfpMetadata, VectorIndex


@pytest.fixture
def embedding():
    """Deterministic embedding provider."""
    return HashEmbedding(dimension=64)


@pytest.fixture
def store():
    """Empty in-memory vector store."""
    return MemoryVectorStore()


@pytest_asyncio.fixture
async def index(embedding, store):
    """Initialized vector index over an in-memory store."""
    index = VectorIndex(embedding, store)
    await index.initialize("test_rfps")
    return index


@pytest.fixture
def company_profile():
    """Company profile used across analyzer tests."""
    return CompanyProfile(
        company_name="Acme Federal",
        certifications=["ISO 9001"],
        experience={"IT": ExperienceArea(years=5)},
        capabilities=["Cloud"],
        registrations=["SAM"],
    )


@pytest.fixture
def rfp_metadata():
    """Metadata for an uploaded RFP."""
    return RfpMetadata(title="Cloud Hosting Services", agency="GSA", rfp_number="RFP-2024-001")


@pytest.fixture
def compliant_rfp_text():
    """RFP text whose every requirement the company_profile meets (3 chunks)."""
    return "Bidders must have ISO 9001 certification for Cloud services. " * 40


@pytest.fixture
def sample_rfp_text():
    """Multi-line RFP text touching eligibility, submission and contract terms."""
    return """Section L - Instructions to Offerors
1. Offerors must have ISO 9001 certification.
2. Offerors must have 10 years experience delivering federal IT programs.
- Demonstrated Cloud migration capability is required.
Proposals are limited to 30 pages in 12 point font with 1 inch margins.
Submit the signed cover letter and attach Form SF-33.
Proposals are due by March 15, 2025 at 2:00 PM EST.
Questions must be received before 02/01/2025.
The Government may terminate this contract without cause at any time. The Contractor shall provide a warranty of five years; liquidated damages apply to late delivery."""
