"""Section and content block models."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TextBlock(_CamelModel):
    """HTML fragment synthesized by a parser."""

    type: Literal["text"] = "text"
    value: str
    allow_html: bool = False


class ImageBlock(_CamelModel):
    """Image referenced by URL (usually a data URL)."""

    type: Literal["image"] = "image"
    url: str
    caption: str | None = None


class HtmlBlock(_CamelModel):
    """Raw HTML fragment taken from an uploaded document."""

    type: Literal["html"] = "html"
    value: str
    allow_raw_html: bool = False


ContentBlock = Annotated[Union[TextBlock, ImageBlock, HtmlBlock], Field(discriminator="type")]


class Section(_CamelModel):
    """One editable website section."""

    id: str
    icon: str
    name: str
    is_header: bool = False
    content: list[ContentBlock] = Field(default_factory=list)
