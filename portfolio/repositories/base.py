"""Storage-agnostic repository contract for case studies."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from portfolio.entities import CaseStudy


class CaseStudyRepository(ABC):
    """Port for case study persistence.

    Lookups that miss return ``None`` (or an empty list); storage failures
    are raised as ``PersistenceError``.
    """

    @abstractmethod
    def find_all(self) -> list[CaseStudy]:
        """All persisted case studies in a stable order."""

    @abstractmethod
    def find_by_id(self, case_study_id: int) -> Optional[CaseStudy]:
        ...

    @abstractmethod
    def find_by_slug(self, slug: str) -> Optional[CaseStudy]:
        ...

    @abstractmethod
    def find_by_technology(self, technology: str) -> list[CaseStudy]:
        """Case studies whose technology list contains ``technology``."""

    @abstractmethod
    def save(self, case_study: CaseStudy) -> int:
        """Insert, or overwrite when ``case_study.id`` is set. Returns the id."""

    @abstractmethod
    def update(self, case_study: CaseStudy) -> bool:
        """Overwrite an existing record. False when no record has that id."""

    @abstractmethod
    def delete(self, case_study_id: int) -> bool:
        """Remove a record. False when it did not exist."""

    @abstractmethod
    def count(self) -> int:
        ...
