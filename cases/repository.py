"""
Read-only case repository.

The core treats repository results as already-fetched, immutable inputs
for a session. :class:`InMemoryCaseRepository` serves the seed catalog and
tests; production callers supply their own implementation of
:class:`CaseRepository`.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from cases.models import Case, CaseFilter, ImagingOption

logger: logging.Logger = logging.getLogger(__name__)


class CaseNotFoundError(LookupError):
    """Raised when a case id is not in the repository.

    Attributes:
        case_id: The id that could not be found.
    """

    def __init__(self, case_id: str) -> None:
        self.case_id: str = case_id
        super().__init__(f"Case {case_id} not found")


class CaseRepository(Protocol):
    """Contract for case and imaging option retrieval."""

    def list_cases(self, case_filter: CaseFilter | None = None) -> list[Case]: ...

    def get_case(self, case_id: str) -> Case: ...

    def get_imaging_options(self) -> list[ImagingOption]: ...


class InMemoryCaseRepository:
    """Case repository backed by in-memory lists."""

    def __init__(
        self, cases: Iterable[Case], imaging_options: Iterable[ImagingOption] = ()
    ) -> None:
        self._cases: dict[str, Case] = {c.id: c for c in cases}
        self._imaging_options: list[ImagingOption] = list(imaging_options)

    def list_cases(self, case_filter: CaseFilter | None = None) -> list[Case]:
        """Return cases matching the filter, in catalog order.

        Explicit ``case_ids`` are returned in the order given and ignore
        the other criteria except publication status.
        """
        case_filter = case_filter or CaseFilter()

        if case_filter.case_ids:
            selected = [
                self._cases[cid] for cid in case_filter.case_ids if cid in self._cases
            ]
        else:
            selected = [
                c for c in self._cases.values() if self._matches(c, case_filter)
            ]

        if case_filter.published_only:
            selected = [c for c in selected if c.is_published]
        if case_filter.limit is not None:
            selected = selected[: case_filter.limit]

        logger.debug("case filter matched %d cases", len(selected))
        return selected

    def get_case(self, case_id: str) -> Case:
        """Return a case by id.

        Raises:
            CaseNotFoundError: If the id is unknown.
        """
        try:
            return self._cases[case_id]
        except KeyError:
            raise CaseNotFoundError(case_id) from None

    def get_imaging_options(self) -> list[ImagingOption]:
        """Return active imaging options."""
        return [o for o in self._imaging_options if o.is_active]

    @staticmethod
    def _matches(case: Case, case_filter: CaseFilter) -> bool:
        if case_filter.categories and case.category not in case_filter.categories:
            return False
        if (
            case_filter.specialty is not None
            and case_filter.specialty not in case.specialty_tags
        ):
            return False
        if case_filter.difficulty and case.difficulty not in case_filter.difficulty:
            return False
        return True
