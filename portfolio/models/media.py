from __future__ import annotations

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.extensions import db

IMAGE_SIZE_NAMES = ("thumbnail", "medium", "large", "full")


class MediaAttachment(db.Model):
    __tablename__ = "media_attachments"

    id: Mapped[int] = mapped_column(primary_key=True)
    alt_text: Mapped[str] = mapped_column(db.String(300), default="", nullable=False)
    # size name -> static path, e.g. {"thumbnail": "uploads/case-studies/<hex>-thumbnail.jpg"}
    sizes: Mapped[dict] = mapped_column(db.JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(db.DateTime(timezone=True), server_default=func.now(), nullable=False)

    def path_for(self, size: str) -> str | None:
        sizes = self.sizes or {}
        return sizes.get(size) or sizes.get("full")
