from portfolio.repositories.base import CaseStudyRepository
from portfolio.repositories.case_study import SqlAlchemyCaseStudyRepository

__all__ = [
    "CaseStudyRepository",
    "SqlAlchemyCaseStudyRepository",
]
