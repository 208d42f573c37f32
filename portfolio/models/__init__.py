from __future__ import annotations

# Import all models so Flask-Migrate sees every table
from portfolio.models.media import IMAGE_SIZE_NAMES, MediaAttachment
from portfolio.models.case_study import (
    STATUS_DRAFT,
    STATUS_PUBLISH,
    STATUSES,
    CaseStudyRecord,
)

__all__ = [
    "IMAGE_SIZE_NAMES",
    "MediaAttachment",
    "CaseStudyRecord",
    "STATUS_DRAFT",
    "STATUS_PUBLISH",
    "STATUSES",
]
