from portfolio.entities.case_study import MIN_TITLE_LENGTH, CaseStudy

__all__ = ["CaseStudy", "MIN_TITLE_LENGTH"]
