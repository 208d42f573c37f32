"""Read-side formatting of stored case study records into API views."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from portfolio.errors import NotFoundError
from portfolio.models import IMAGE_SIZE_NAMES, CaseStudyRecord, MediaAttachment
from portfolio.repositories.case_study import SqlAlchemyCaseStudyRepository
from portfolio.schemas.case_studies import CaseStudyView, FeaturedImageSizes, FeaturedImageView
from portfolio.utils.slug import slugify
from portfolio.utils.text import split_technologies, trim_words

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
NOT_FOUND_CODE = "case_study_not_found"


@dataclass(frozen=True)
class ViewSettings:
    site_url: str = "http://localhost:8000"
    permalink_base: str = "portafolio"
    excerpt_words: int = 30

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ViewSettings:
        return cls(
            site_url=str(config.get("SITE_URL", cls.site_url)).rstrip("/"),
            permalink_base=str(config.get("PERMALINK_BASE", cls.permalink_base)).strip("/"),
            excerpt_words=int(config.get("EXCERPT_WORDS", cls.excerpt_words)),
        )


def format_datetime(value: datetime | None) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def permalink(slug: str, settings: ViewSettings) -> str:
    return f"{settings.site_url}/{settings.permalink_base}/{slug}/"


def media_url(path: str | None, settings: ViewSettings) -> str | None:
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{settings.site_url}/static/{path.lstrip('/')}"


def format_featured_image(media: MediaAttachment | None, settings: ViewSettings) -> FeaturedImageView | None:
    if media is None:
        return None
    sizes = {name: media_url(media.path_for(name), settings) for name in IMAGE_SIZE_NAMES}
    return FeaturedImageView(
        url=sizes["full"],
        alt=media.alt_text or "",
        sizes=FeaturedImageSizes(**sizes),
    )


def format_case_study(record: CaseStudyRecord, settings: ViewSettings) -> CaseStudyView:
    content = record.content or ""
    published = format_datetime(record.published_at)
    return CaseStudyView(
        id=record.id,
        title=record.title,
        slug=record.slug,
        excerpt=record.excerpt or trim_words(content or record.problem, settings.excerpt_words),
        content=content,
        client=record.client or "",
        # Records written before problem/solution had their own columns keep
        # the whole narrative in the body
        problem=record.problem or content,
        solution=record.solution or "",
        results=record.results or "",
        technologies=split_technologies(record.technologies),
        date_completed=record.date_completed or published,
        featured_image=format_featured_image(record.featured_image, settings),
        url=permalink(record.slug, settings),
        date_published=published,
        date_modified=format_datetime(record.modified_at),
    )


def list_case_studies(
    repository: SqlAlchemyCaseStudyRepository,
    settings: ViewSettings,
    technology: str | None = None,
) -> list[CaseStudyView]:
    return [format_case_study(r, settings) for r in repository.list_published(technology)]


def get_case_study(
    repository: SqlAlchemyCaseStudyRepository,
    settings: ViewSettings,
    slug: str,
) -> CaseStudyView:
    """Return the published case study for ``slug``; raises NotFoundError on a miss."""
    clean_slug = slugify(slug)
    record = repository.get_published_by_slug(clean_slug) if clean_slug else None
    if record is None:
        raise NotFoundError("Case study not found", code=NOT_FOUND_CODE, status=404)
    return format_case_study(record, settings)


def get_available_technologies(repository: SqlAlchemyCaseStudyRepository) -> list[str]:
    """Distinct technology names across published case studies (case-sensitive)."""
    seen: dict[str, None] = {}
    for value in repository.technology_values():
        for token in split_technologies(value):
            seen.setdefault(token, None)
    return list(seen)
