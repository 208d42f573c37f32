from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio.utils.text import split_technologies


class CaseStudyListQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")
    technology: Optional[str] = Field(default=None, max_length=100)

    @field_validator("technology")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        return v or None


class FeaturedImageSizes(BaseModel):
    thumbnail: Optional[str] = None
    medium: Optional[str] = None
    large: Optional[str] = None
    full: Optional[str] = None


class FeaturedImageView(BaseModel):
    url: Optional[str]
    alt: str = ""
    sizes: FeaturedImageSizes


class CaseStudyView(BaseModel):
    id: int
    title: str
    slug: str
    excerpt: str
    content: str
    client: str
    problem: str
    solution: str
    results: str
    technologies: List[str]
    date_completed: str
    featured_image: Optional[FeaturedImageView]
    url: str
    date_published: str
    date_modified: str


class CaseStudyInput(BaseModel):
    """One case study as accepted by the import and create commands."""
    model_config = ConfigDict(extra="ignore")
    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    client: str = Field(..., min_length=1, max_length=200)
    problem: str = ""
    solution: str = ""
    results: str = ""
    technologies: List[str] = Field(default_factory=list)
    slug: Optional[str] = Field(default=None, max_length=220)
    date_completed: Optional[date] = None
    content: Optional[str] = None
    excerpt: Optional[str] = Field(default=None, max_length=300)
    status: Literal["publish", "draft"] = "publish"

    @field_validator("technologies", mode="before")
    @classmethod
    def split_comma_string(cls, v):
        # Accept the stored "AWS, Lambda" form as well as a list
        if isinstance(v, str):
            return split_technologies(v)
        return v or []


class CaseStudiesPayload(BaseModel):
    case_studies: List[CaseStudyInput] = Field(default_factory=list)


# Force Pydantic to rebuild the model to resolve all forward references
CaseStudiesPayload.model_rebuild()
