import logging
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from ..config import get_settings
from ..errors import MalformedRequestError
from ..llm.client import LLMClient, llm_client
from ..llm.prompts import build_messages
from ..rendering.citations import bind_citations
from ..retrieval.merge import EvidenceAggregator
from ..schemas.outputs import AnswerResponse, ChatTurn, SearchRequest

settings = get_settings()
logger = logging.getLogger("citesearch.pipeline")


def validate_request(payload: Any) -> SearchRequest:
    """Parses and length-checks an inbound request before anything is fetched."""
    if not isinstance(payload, dict):
        raise MalformedRequestError("Request body must be a JSON object")
    try:
        request = SearchRequest.model_validate(payload)
    except ValidationError as e:
        raise MalformedRequestError(f"Invalid request: {e.errors()[0]['msg']}") from e

    query = request.query.strip()
    if not query:
        raise MalformedRequestError("Query required")
    if len(query) < settings.MIN_QUERY_CHARS:
        raise MalformedRequestError(f"Query must be at least {settings.MIN_QUERY_CHARS} characters")
    if len(query) > settings.MAX_QUERY_CHARS:
        raise MalformedRequestError(f"Query must be at most {settings.MAX_QUERY_CHARS} characters")
    return SearchRequest(query=query, history=request.history)


class Pipeline:
    def __init__(self, aggregator: Optional[EvidenceAggregator] = None, llm: Optional[LLMClient] = None):
        self._aggregator = aggregator
        self.llm = llm or llm_client

    @property
    def aggregator(self) -> EvidenceAggregator:
        if self._aggregator is None:
            self._aggregator = EvidenceAggregator()
        return self._aggregator

    async def answer(self, query: str, history: Optional[Sequence[ChatTurn]] = None) -> AnswerResponse:
        """
        One evidence cycle: aggregate -> prompt -> complete -> bind.
        EmptyEvidenceError stops the cycle before a prompt is built;
        CompletionError always propagates.
        """
        request = validate_request({"query": query, "history": [t.model_dump() for t in history or []]})
        logger.info(f"Answering query: {request.query!r}")

        evidence = await self.aggregator.aggregate(request.query)
        if evidence.errors:
            logger.info(f"Proceeding with partial evidence; failures: {evidence.errors}")

        messages = build_messages(request.query, evidence.sources, request.history)
        answer_text = await self.llm.complete(messages)

        rendered = bind_citations(answer_text, evidence.sources)
        logger.info(
            f"Answer cites {len(rendered.cited_ids)}/{len(evidence.sources)} sources"
            + (f", {len(rendered.unresolved)} unresolved markers" if rendered.unresolved else "")
        )
        return AnswerResponse(
            answer=answer_text,
            rendered=rendered,
            sources=evidence.sources,
            images=evidence.images,
            videos=evidence.videos,
        )

    async def answer_payload(self, payload: Dict[str, Any]) -> AnswerResponse:
        request = validate_request(payload)
        return await self.answer(request.query, request.history)

pipeline = Pipeline()
