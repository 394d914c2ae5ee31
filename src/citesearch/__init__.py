"""citesearch - answers questions from public search evidence with bound citations.

One evidence cycle gathers snippets from redundant SearxNG mirrors (with
failover) and specialized sources (Wikipedia, GitHub, Hacker News, Open
Library) concurrently, numbers them, asks a language model for a cited
answer, and binds the model's [n] markers back to the sources.

Components:
- retrieval: fetcher, mirror failover, adapters, merger
- llm: grounding prompt and completion client
- rendering: citation binding
- pipeline: the end-to-end cycle
- main_api: FastAPI boundary
"""
