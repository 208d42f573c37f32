from __future__ import annotations

# Re-export common schema classes for convenient imports
from .case_studies import (  # noqa: F401
    CaseStudiesPayload,
    CaseStudyInput,
    CaseStudyListQuery,
    CaseStudyView,
    FeaturedImageSizes,
    FeaturedImageView,
)

__all__ = [
    "CaseStudiesPayload",
    "CaseStudyInput",
    "CaseStudyListQuery",
    "CaseStudyView",
    "FeaturedImageSizes",
    "FeaturedImageView",
]
