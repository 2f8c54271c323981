import pytest

from attrition_pipeline.domains.attrition.store import InMemoryReportStore


@pytest.fixture
def store() -> InMemoryReportStore:
    return InMemoryReportStore()
