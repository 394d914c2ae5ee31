"""Registry of interchangeable SearxNG mirrors.

The registry is built once per process and only ever read afterwards;
the failover coordinator shuffles its own copy.
"""

from typing import List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict

from ..config import get_settings, load_backend_file
from ..log import get_logger

logger = get_logger("registry")

DEFAULT_INSTANCES = (
    "https://searx.be",
    "https://search.mdel.net",
    "https://searx.work",
    "https://priv.au",
    "https://searx.tiekoetter.com",
    "https://searx.space",
    "https://search.disroot.org",
)


class BackendDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    base_url: str
    engines: Tuple[str, ...] = ()

    @property
    def search_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/search"


def _split_engines(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(e.strip() for e in value if e and e.strip())


def default_backends() -> List[BackendDescriptor]:
    engines = _split_engines(get_settings().SEARXNG_ENGINES)
    return [
        BackendDescriptor(name=urlparse(url).netloc, base_url=url, engines=engines)
        for url in DEFAULT_INSTANCES
    ]


def load_backends(path: Optional[str] = None) -> List[BackendDescriptor]:
    """
    Reads the YAML registry if present, otherwise the built-in mirror list.
    Entries without a url are skipped.
    """
    data = load_backend_file(path)
    entries = data.get("backends") or []
    if not entries:
        return default_backends()

    engines = _split_engines(get_settings().SEARXNG_ENGINES)
    backends = []
    for entry in entries:
        url = (entry or {}).get("url")
        if not url:
            logger.warning(f"Skipping backend entry without url: {entry}")
            continue
        backends.append(BackendDescriptor(
            name=entry.get("name") or urlparse(url).netloc,
            base_url=url,
            engines=_split_engines(entry.get("engines")) or engines,
        ))
    return backends
