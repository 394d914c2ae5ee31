"""Grounding prompt construction.

The template text is fixed: the citation binder relies on the model answering
with bracketed ids, so wording changes here change what comes back.
"""

from typing import Dict, List, Optional, Sequence

from ..config import get_settings
from ..errors import EmptyEvidenceError
from ..schemas.evidence import Source
from ..schemas.outputs import ChatTurn

settings = get_settings()

SYSTEM_PROMPT = (
    "You are an expert research assistant that provides detailed, well-cited answers. "
    "Always cite sources with [number] and provide comprehensive explanations."
)

PROMPT_TEMPLATE = """Research Query: "{query}"

Sources:
{sources}

Provide a comprehensive, detailed answer (400-600 words) that:
1. Directly answers the query in the opening
2. Provides deep analysis with multiple paragraphs
3. Includes specific data, numbers, and facts
4. Cites EVERY claim with [1], [2], etc.
5. Covers multiple perspectives if sources differ
6. Is well-structured with logical flow
7. Explains context and background
8. Only uses information from the provided sources

Answer:"""


def format_sources(sources: Sequence[Source]) -> str:
    ordered = sorted(sources, key=lambda s: s.id)
    return "\n\n".join(f"[{s.id}] {s.title}\n{s.content}\n---" for s in ordered)


def build_prompt(query: str, sources: Sequence[Source]) -> str:
    if not sources:
        raise EmptyEvidenceError("Refusing to build a prompt without sources")
    return PROMPT_TEMPLATE.format(query=query, sources=format_sources(sources))


def build_messages(
    query: str,
    sources: Sequence[Source],
    history: Optional[Sequence[ChatTurn]] = None,
) -> List[Dict[str, str]]:
    """
    System instruction, then the most recent prior turns, then the grounding
    prompt as the final user message.
    """
    prompt = build_prompt(query, sources)
    messages = [{"role": "system", "content": SYSTEM_PROMPT}]
    if history:
        recent = list(history)[-settings.MAX_HISTORY_TURNS:] if settings.MAX_HISTORY_TURNS > 0 else []
        messages.extend({"role": turn.role, "content": turn.content} for turn in recent)
    messages.append({"role": "user", "content": prompt})
    return messages
