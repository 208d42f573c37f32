from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio.extensions import db
from portfolio.models.media import MediaAttachment

STATUS_PUBLISH = "publish"
STATUS_DRAFT = "draft"
STATUSES = (STATUS_PUBLISH, STATUS_DRAFT)


class CaseStudyRecord(db.Model):
    __tablename__ = "case_studies"

    id: Mapped[int] = mapped_column(primary_key=True)
    slug: Mapped[str] = mapped_column(db.String(220), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(db.String(200), nullable=False)
    content: Mapped[str] = mapped_column(db.Text, default="", nullable=False)
    excerpt: Mapped[str] = mapped_column(db.String(300), default="", nullable=False)
    client: Mapped[str] = mapped_column(db.String(200), default="", nullable=False)
    problem: Mapped[str] = mapped_column(db.Text, default="", nullable=False)
    solution: Mapped[str] = mapped_column(db.Text, default="", nullable=False)
    results: Mapped[str] = mapped_column(db.Text, default="", nullable=False)
    # Comma separated, e.g. "AWS, Lambda"
    technologies: Mapped[str] = mapped_column(db.String(500), default="", nullable=False)
    # Y-m-d
    date_completed: Mapped[str | None] = mapped_column(db.String(10), nullable=True)
    status: Mapped[str] = mapped_column(db.String(20), default=STATUS_PUBLISH, nullable=False)
    featured_image_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("media_attachments.id", ondelete="SET NULL"), nullable=True
    )
    published_at: Mapped[datetime] = mapped_column(db.DateTime(timezone=True), server_default=func.now(), nullable=False)
    modified_at: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    featured_image: Mapped[MediaAttachment | None] = relationship(lazy="joined")

    __table_args__ = (
        Index("ix_case_studies_status_published_at", "status", "published_at"),
    )
