from __future__ import annotations

import os

import structlog
from sqlalchemy.orm import Session

from portfolio.errors import InvalidMediaError, NotFoundError
from portfolio.models import MediaAttachment
from portfolio.repositories.case_study import SqlAlchemyCaseStudyRepository
from portfolio.utils.image import save_image_variants

logger = structlog.get_logger(__name__)


def attach_featured_image(
    repository: SqlAlchemyCaseStudyRepository,
    case_study_id: int,
    image_bytes: bytes,
    *,
    static_folder: str,
    alt: str = "",
    subdir: str = "uploads/case-studies",
    max_bytes: int = 5 * 1024 * 1024,
) -> MediaAttachment:
    """Store every size variant of an image and make it the record's featured image."""
    if repository.get_record(case_study_id) is None:
        raise NotFoundError(f"Case study {case_study_id} not found", code="case_study_not_found")

    ok, err, info, paths = save_image_variants(
        image_bytes, static_folder=static_folder, subdir=subdir, max_bytes=max_bytes
    )
    if not ok:
        logger.warning("featured_image_rejected", id=case_study_id, error=err, info=info)
        raise InvalidMediaError(err or "invalid_image", info)

    session: Session = repository.session
    media = MediaAttachment(alt_text=(alt or "").strip(), sizes=paths)
    session.add(media)
    try:
        attached = repository.attach_featured_image(case_study_id, media)
    except Exception:
        _remove_files(static_folder, paths.values())
        raise
    if not attached:
        # Deleted between the lookup above and the write
        session.expunge(media)
        _remove_files(static_folder, paths.values())
        raise NotFoundError(f"Case study {case_study_id} not found", code="case_study_not_found")
    return media


def _remove_files(static_folder: str, paths) -> None:
    for rel in paths:
        path = os.path.join(static_folder, rel)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            logger.error("featured_image_cleanup_failed", path=rel, error=str(e))
