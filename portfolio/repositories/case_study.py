from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

import structlog
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio.entities import CaseStudy
from portfolio.errors import PersistenceError, SlugConflictError
from portfolio.models import STATUS_PUBLISH, STATUSES, CaseStudyRecord, MediaAttachment
from portfolio.repositories.base import CaseStudyRepository
from portfolio.utils.text import join_technologies, split_technologies

logger = structlog.get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SqlAlchemyCaseStudyRepository(CaseStudyRepository):
    """Case study repository backed by a SQLAlchemy session.

    The session is injected by the caller; inside the web app that is the
    request-scoped ``db.session``.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("case_study_integrity_error", action=action, error=str(e.orig))
            if "slug" in str(e.orig).lower():
                raise SlugConflictError("slug_conflict") from e
            raise PersistenceError(f"Failed to {action} case study") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("case_study_storage_error", action=action, error=str(e))
            raise PersistenceError(f"Failed to {action} case study") from e

    # Mapping

    @staticmethod
    def to_entity(record: CaseStudyRecord) -> CaseStudy:
        return CaseStudy(
            id=record.id,
            title=record.title,
            client=record.client or "",
            problem=record.problem or "",
            solution=record.solution or "",
            results=record.results or "",
            technologies=tuple(split_technologies(record.technologies)),
            # "" is stored for titles with nothing sluggable; re-derive it
            slug=record.slug or None,
            date_completed=record.date_completed,
        )

    @staticmethod
    def _apply(record: CaseStudyRecord, case_study: CaseStudy) -> None:
        record.title = case_study.title.strip()
        record.slug = case_study.slug
        record.client = case_study.client.strip()
        record.problem = case_study.problem
        record.solution = case_study.solution
        record.results = case_study.results
        record.technologies = join_technologies(case_study.technologies)
        record.date_completed = (
            case_study.date_completed.isoformat() if case_study.date_completed else None
        )
        record.modified_at = _now()

    def _sync_id_sequence(self) -> None:
        # PostgreSQL sequences do not move past explicitly inserted ids
        if self.session.get_bind().dialect.name != "postgresql":
            return
        self.session.execute(text(
            "SELECT setval(pg_get_serial_sequence('case_studies', 'id'), "
            "(SELECT MAX(id) FROM case_studies))"
        ))

    # Port

    def find_all(self) -> list[CaseStudy]:
        with self._storage_errors("list"):
            records = self.session.execute(
                select(CaseStudyRecord).order_by(
                    CaseStudyRecord.published_at.desc(), CaseStudyRecord.id.desc()
                )
            ).scalars().all()
        return [self.to_entity(r) for r in records]

    def find_by_id(self, case_study_id: int) -> Optional[CaseStudy]:
        record = self.get_record(case_study_id)
        return self.to_entity(record) if record else None

    def find_by_slug(self, slug: str) -> Optional[CaseStudy]:
        with self._storage_errors("read"):
            record = self.session.execute(
                select(CaseStudyRecord).filter_by(slug=slug)
            ).scalar_one_or_none()
        return self.to_entity(record) if record else None

    def find_by_technology(self, technology: str) -> list[CaseStudy]:
        if not technology:
            return []
        # LIKE narrows the scan; the exact token match happens on the entity
        with self._storage_errors("list"):
            records = self.session.execute(
                select(CaseStudyRecord)
                .where(CaseStudyRecord.technologies.contains(technology, autoescape=True))
                .order_by(CaseStudyRecord.published_at.desc(), CaseStudyRecord.id.desc())
            ).scalars().all()
        entities = (self.to_entity(r) for r in records)
        return [e for e in entities if e.has_technology(technology)]

    def save(
        self,
        case_study: CaseStudy,
        *,
        status: str = STATUS_PUBLISH,
        content: str | None = None,
        excerpt: str | None = None,
    ) -> int:
        if status not in STATUSES:
            raise ValueError(f"Unknown status: {status}")
        with self._storage_errors("save"):
            record = None
            if case_study.id is not None:
                record = self.session.get(CaseStudyRecord, case_study.id)
            created = record is None
            if created:
                record = CaseStudyRecord(id=case_study.id, published_at=_now(), content="", excerpt="")
                self.session.add(record)
            self._apply(record, case_study)
            record.status = status
            if content is not None:
                record.content = content
            if excerpt is not None:
                record.excerpt = excerpt
            if created and case_study.id is not None:
                self.session.flush()
                self._sync_id_sequence()
            self.session.commit()
        logger.info("case_study_saved", id=record.id, slug=record.slug, created=created)
        return record.id

    def update(self, case_study: CaseStudy) -> bool:
        if case_study.id is None:
            return False
        with self._storage_errors("update"):
            record = self.session.get(CaseStudyRecord, case_study.id)
            if record is None:
                return False
            self._apply(record, case_study)
            self.session.commit()
        logger.info("case_study_updated", id=record.id, slug=record.slug)
        return True

    def delete(self, case_study_id: int) -> bool:
        with self._storage_errors("delete"):
            record = self.session.get(CaseStudyRecord, case_study_id)
            if record is None:
                return False
            self.session.delete(record)
            self.session.commit()
        logger.info("case_study_deleted", id=case_study_id)
        return True

    def count(self) -> int:
        with self._storage_errors("count"):
            return self.session.execute(
                select(func.count()).select_from(CaseStudyRecord)
            ).scalar_one()

    # Record-level queries used by the REST boundary

    def get_record(self, case_study_id: int) -> Optional[CaseStudyRecord]:
        with self._storage_errors("read"):
            return self.session.get(CaseStudyRecord, case_study_id)

    def list_published(self, technology: str | None = None) -> list[CaseStudyRecord]:
        """Published records, newest first, optionally filtered by a
        case-insensitive substring of the stored technologies string."""
        stmt = select(CaseStudyRecord).filter_by(status=STATUS_PUBLISH)
        if technology:
            stmt = stmt.where(CaseStudyRecord.technologies.icontains(technology, autoescape=True))
        stmt = stmt.order_by(CaseStudyRecord.published_at.desc(), CaseStudyRecord.id.desc())
        with self._storage_errors("list"):
            return list(self.session.execute(stmt).scalars())

    def get_published_by_slug(self, slug: str) -> Optional[CaseStudyRecord]:
        with self._storage_errors("read"):
            return self.session.execute(
                select(CaseStudyRecord).filter_by(slug=slug, status=STATUS_PUBLISH)
            ).scalar_one_or_none()

    def technology_values(self) -> list[str]:
        """Distinct non-empty technologies strings across published records."""
        with self._storage_errors("list"):
            return list(
                self.session.execute(
                    select(CaseStudyRecord.technologies)
                    .filter_by(status=STATUS_PUBLISH)
                    .where(CaseStudyRecord.technologies != "")
                    .distinct()
                ).scalars()
            )

    def set_status(self, case_study_id: int, status: str) -> bool:
        if status not in STATUSES:
            raise ValueError(f"Unknown status: {status}")
        with self._storage_errors("update"):
            record = self.session.get(CaseStudyRecord, case_study_id)
            if record is None:
                return False
            record.status = status
            record.modified_at = _now()
            self.session.commit()
        logger.info("case_study_status_changed", id=case_study_id, status=status)
        return True

    def attach_featured_image(self, case_study_id: int, media: MediaAttachment) -> bool:
        with self._storage_errors("update"):
            record = self.session.get(CaseStudyRecord, case_study_id)
            if record is None:
                return False
            record.featured_image = media
            record.modified_at = _now()
            self.session.commit()
        logger.info("case_study_image_attached", id=case_study_id, media_id=media.id)
        return True
