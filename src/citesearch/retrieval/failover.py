"""Sequential failover across interchangeable SearxNG mirrors."""

import random
from typing import Any, List, Optional, Sequence

from ..errors import AggregateError, FetchError, FetchFailure
from ..log import get_logger
from .fetch import FetchResult, Fetcher, fetcher as default_fetcher
from .registry import BackendDescriptor

logger = get_logger("failover")


def _has_results(data: Any) -> bool:
    return isinstance(data, dict) and isinstance(data.get("results"), list) and len(data["results"]) > 0


async def try_backends(
    backends: Sequence[BackendDescriptor],
    query: str,
    fetcher: Optional[Fetcher] = None,
    rng: Optional[random.Random] = None,
    timeout: Optional[float] = None,
) -> FetchResult:
    """
    Tries mirrors one at a time in shuffled order and returns the first
    response with a non-empty `results` list. Failed mirrors are skipped,
    never retried. Raises AggregateError carrying the last failure once
    every mirror has been tried.
    """
    if not backends:
        raise AggregateError("no backends configured")

    fetcher = fetcher or default_fetcher
    order: List[BackendDescriptor] = list(backends)
    (rng or random).shuffle(order)

    attempts: List[FetchError] = []
    for backend in order:
        result = await fetcher.fetch(backend, query, timeout=timeout)
        if result.ok and _has_results(result.data):
            logger.info(f"Fetched {len(result.data['results'])} results from {backend.name}")
            return result

        error = result.error or FetchError(backend.name, FetchFailure.NO_RESULTS, "response had no results")
        logger.warning(f"Backend {error}")
        attempts.append(error)

    raise AggregateError(
        f"all {len(order)} backends failed",
        last_error=attempts[-1],
        attempts=attempts,
    )
