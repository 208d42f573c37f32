from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Iterable, Mapping

from portfolio.errors import InvalidEntityError
from portfolio.utils.slug import is_valid_slug, slugify

MIN_TITLE_LENGTH = 3


def _coerce_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidEntityError(f"Invalid completion date: {value!r}")


@dataclass(frozen=True)
class CaseStudy:
    """A validated portfolio entry.

    Construction either yields a valid instance or raises InvalidEntityError;
    ``slug`` is derived from ``title`` when not supplied.
    """

    title: str
    client: str
    problem: str = ""
    solution: str = ""
    results: str = ""
    technologies: tuple[str, ...] = field(default_factory=tuple)
    slug: str | None = None
    id: int | None = None
    date_completed: date | None = None

    def __post_init__(self) -> None:
        title = (self.title or "").strip()
        if not title:
            raise InvalidEntityError("Case study title cannot be empty")
        # len() counts code points, not bytes
        if len(title) < MIN_TITLE_LENGTH:
            raise InvalidEntityError(
                f"Case study title must be at least {MIN_TITLE_LENGTH} characters"
            )
        if not (self.client or "").strip():
            raise InvalidEntityError("Case study client cannot be empty")

        if isinstance(self.technologies, str):
            raise InvalidEntityError("Technologies must be a sequence of names, not a string")
        object.__setattr__(self, "technologies", tuple(self.technologies or ()))
        object.__setattr__(self, "date_completed", _coerce_date(self.date_completed))

        if self.slug is None:
            object.__setattr__(self, "slug", slugify(self.title))
        elif not is_valid_slug(self.slug):
            raise InvalidEntityError(
                "Case study slug may only contain lowercase letters, digits and single hyphens"
            )

    def with_id(self, case_study_id: int | None) -> CaseStudy:
        return replace(self, id=case_study_id)

    def with_slug(self, slug: str) -> CaseStudy:
        return replace(self, slug=slug)

    def has_technology(self, name: str) -> bool:
        return name in self.technologies

    def to_map(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "client": self.client,
            "problem": self.problem,
            "solution": self.solution,
            "results": self.results,
            "technologies": list(self.technologies),
            "slug": self.slug,
            "date_completed": self.date_completed.isoformat() if self.date_completed else None,
        }

    @classmethod
    def from_map(cls, data: Mapping[str, Any]) -> CaseStudy:
        technologies: Iterable[str] = data.get("technologies") or ()
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            client=data.get("client") or "",
            problem=data.get("problem") or "",
            solution=data.get("solution") or "",
            results=data.get("results") or "",
            technologies=tuple(technologies),
            slug=data.get("slug") or None,
            date_completed=data.get("date_completed"),
        )
