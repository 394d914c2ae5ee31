from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union

from .evidence import ImageResult, Source, VideoResult


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class SearchRequest(BaseModel):
    query: str
    history: List[ChatTurn] = []


class TextSegment(BaseModel):
    type: Literal["text"] = "text"
    text: str


class CitationSegment(BaseModel):
    type: Literal["citation"] = "citation"
    id: int
    url: str
    title: str


class HighlightSegment(BaseModel):
    type: Literal["highlight"] = "highlight"
    children: List[Union[TextSegment, CitationSegment]]


Segment = Union[TextSegment, CitationSegment, HighlightSegment]


class Paragraph(BaseModel):
    segments: List[Segment]


class RenderableAnswer(BaseModel):
    paragraphs: List[Paragraph]
    cited_ids: List[int] = Field(default_factory=list, description="Resolved ids in first-seen order")
    unresolved: List[str] = Field(default_factory=list, description="Markers left verbatim, e.g. '[7]'")


class AnswerResponse(BaseModel):
    answer: str
    rendered: RenderableAnswer
    sources: List[Source]
    images: List[ImageResult] = []
    videos: List[VideoResult] = []


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
