"""Declarations of the content types the app stores and exposes."""
from __future__ import annotations

from dataclasses import dataclass, field

from flask import Flask

EXTENSION_KEY = "portfolio.content_types"


@dataclass(frozen=True)
class ContentAttribute:
    name: str
    type: str = "string"
    description: str = ""
    show_in_api: bool = True

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "show_in_api": self.show_in_api,
        }


@dataclass(frozen=True)
class ContentType:
    name: str
    label: str
    singular_label: str
    rest_base: str
    permalink_base: str
    supports: tuple[str, ...] = ()
    attributes: tuple[ContentAttribute, ...] = field(default_factory=tuple)

    def attribute_names(self) -> list[str]:
        return [a.name for a in self.attributes if a.show_in_api]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "singular_label": self.singular_label,
            "rest_base": self.rest_base,
            "permalink_base": self.permalink_base,
            "supports": list(self.supports),
            "attributes": [a.to_dict() for a in self.attributes],
        }


def _attribute(name: str) -> ContentAttribute:
    return ContentAttribute(name=name, type="string", description=name.replace("_", " ").capitalize())


def case_study_type(permalink_base: str = "portafolio") -> ContentType:
    return ContentType(
        name="case_study",
        label="Case Studies",
        singular_label="Case Study",
        rest_base="case-studies",
        permalink_base=permalink_base,
        supports=("title", "editor", "thumbnail", "excerpt", "custom-fields"),
        attributes=tuple(_attribute(n) for n in ("client", "results", "technologies", "date_completed")),
    )


class ContentTypeRegistry:
    def __init__(self) -> None:
        self._types: dict[str, ContentType] = {}

    def register(self, content_type: ContentType) -> None:
        if content_type.name in self._types:
            raise ValueError(f"Content type already registered: {content_type.name}")
        self._types[content_type.name] = content_type

    def get(self, name: str) -> ContentType | None:
        return self._types.get(name)

    def names(self) -> list[str]:
        return list(self._types)


def get_registry(app: Flask) -> ContentTypeRegistry:
    return app.extensions.setdefault(EXTENSION_KEY, ContentTypeRegistry())


def register_case_study_type(app: Flask) -> None:
    get_registry(app).register(case_study_type(app.config.get("PERMALINK_BASE", "portafolio")))
