"""Shared fixtures."""

import pytest

from aiie.models import ClinicalInput, Duration, Severity, Sex
from assessment.timer import ManualScheduler
from cases import CASES, IMAGING_OPTIONS, InMemoryCaseRepository
from storage import InMemorySnapshotStore

# Two low back pain cases and one headache case; see cases/catalog.py
SEQUENCE = ["lbp-acute-mechanical", "lbp-cancer-history", "headache-migraine"]


@pytest.fixture
def catalog():
    return {c.id: c for c in CASES}


@pytest.fixture
def three_cases(catalog):
    return [catalog[cid] for cid in SEQUENCE]


@pytest.fixture
def repository():
    return InMemoryCaseRepository(CASES, IMAGING_OPTIONS)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store():
    return InMemorySnapshotStore()


@pytest.fixture
def plain_input():
    """Presentation with no active factors."""
    return ClinicalInput(
        age=45,
        sex=Sex.MALE,
        duration=Duration.SUBACUTE,
        severity=Severity.MODERATE,
    )
