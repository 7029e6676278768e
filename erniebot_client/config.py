from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from .api import BASE_URL
from .exceptions import ApiAuthError
from .transport import DEFAULT_READ_TIMEOUT

TOKEN_ENV = 'ERNIEBOT_ACCESS_TOKEN'
TIMEOUT_ENV = 'ERNIEBOT_TIMEOUT'
BASE_URL_ENV = 'ERNIEBOT_BASE_URL'


def env(name: str, required: bool = True) -> Optional[str]:
    val = os.getenv(name)
    if required and (val is None or val.strip() == ''):
        raise ApiAuthError(f"Missing required environment variable: {name}")
    return val


@dataclass(frozen=True)
class ClientConfig:
    token: str
    timeout: float = DEFAULT_READ_TIMEOUT
    base_url: str = BASE_URL

    @classmethod
    def from_env(cls, token: Optional[str] = None, timeout: Optional[float] = None) -> 'ClientConfig':
        """Read settings from the environment; explicit arguments take precedence."""
        token = token or env(TOKEN_ENV)
        if timeout is None:
            raw_timeout = env(TIMEOUT_ENV, required=False)
            try:
                timeout = float(raw_timeout) if raw_timeout and raw_timeout.strip() else DEFAULT_READ_TIMEOUT
            except ValueError:
                raise ValueError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}") from None
        base_url = env(BASE_URL_ENV, required=False) or BASE_URL
        return cls(token, timeout=timeout, base_url=base_url)  # type: ignore[arg-type]
