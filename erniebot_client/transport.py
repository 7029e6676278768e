from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple, Union

import requests
from requests.adapters import HTTPAdapter

from .auth import TokenAuth

Timeout = Union[int, float, timedelta]

DEFAULT_POOL_SIZE = 5
DEFAULT_READ_TIMEOUT = 10.0


def to_seconds(value: Optional[Timeout]) -> Optional[float]:
    """Normalize a timeout to seconds; ``0``/``None`` means no timeout."""
    if value is None:
        return None
    seconds = value.total_seconds() if isinstance(value, timedelta) else float(value)
    if seconds < 0:
        raise ValueError(f"timeout must be >= 0, got {value!r}")
    return seconds or None


@dataclass(frozen=True)
class TransportConfig:
    read_timeout: Optional[Timeout] = DEFAULT_READ_TIMEOUT
    connect_timeout: Optional[Timeout] = 0
    pool_size: int = DEFAULT_POOL_SIZE

    def __post_init__(self):
        if self.pool_size < 1:
            raise ValueError('pool_size must be >= 1')
        # validate early so a bad value fails at construction
        to_seconds(self.read_timeout)
        to_seconds(self.connect_timeout)

    def requests_timeout(self) -> Tuple[Optional[float], Optional[float]]:
        return to_seconds(self.connect_timeout), to_seconds(self.read_timeout)


def default_session(token: Optional[str], config: TransportConfig | None = None) -> requests.Session:
    """Session with token auth and a bounded connection pool for http and https."""
    auth = TokenAuth(token)
    config = config or TransportConfig()
    session = requests.Session()
    session.auth = auth
    session.headers.update({
        'Accept': 'application/json',
        'Content-Type': 'application/json',
    })
    adapter = HTTPAdapter(pool_connections=config.pool_size, pool_maxsize=config.pool_size)
    session.mount('https://', adapter)
    session.mount('http://', adapter)
    return session
