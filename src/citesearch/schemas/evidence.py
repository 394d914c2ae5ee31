"""Pydantic schemas for raw upstream items and the merged evidence set.

Raw items are a tagged union (TextItem / ImageItem / VideoItem) produced once
at ingestion. Source, ImageResult and VideoResult are the canonical shapes
that leave the merger.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional, Union

TextKind = Literal["web", "encyclopedia", "code", "news", "book"]


class TextItem(BaseModel):
    kind: TextKind = "web"
    url: str
    title: str
    content: str
    origin: str


class ImageItem(BaseModel):
    kind: Literal["image"] = "image"
    url: str
    img_src: str
    title: str = ""


class VideoItem(BaseModel):
    kind: Literal["video"] = "video"
    url: str
    title: str = ""


RawItem = Union[TextItem, ImageItem, VideoItem]


class Source(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(..., ge=1)
    title: str
    url: str
    content: str
    origin_tag: str = Field(..., alias="originTag")
    snippet: Optional[str] = None


class ImageResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    img_src: str = Field(..., alias="imgSrc")
    title: str = ""


class VideoResult(BaseModel):
    url: str
    title: str = ""


class EvidenceSet(BaseModel):
    query: str
    sources: List[Source]
    images: List[ImageResult] = []
    videos: List[VideoResult] = []
    errors: List[str] = []
