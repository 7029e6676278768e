from __future__ import annotations
import logging
from concurrent.futures import Future
from typing import Optional, TypeVar

import requests

from .api import BASE_URL, ErnieBotApi
from .config import ClientConfig
from .exceptions import ApiHttpException, DecodeError
from .models import (
    ApiError,
    ChatCompletionRequest,
    ChatCompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
)
from .serialization import JsonMapper
from .transport import DEFAULT_POOL_SIZE, DEFAULT_READ_TIMEOUT, Timeout, TransportConfig
from .transport import default_session as _default_session

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_TIMEOUT = DEFAULT_READ_TIMEOUT
_error_mapper = JsonMapper()


class ErnieBotService:
    """Blocking facade over ``ErnieBotApi``.

    Usage:
        service = ErnieBotService(token)                  # 10s read timeout
        service = ErnieBotService(token, timeout=0)       # no read timeout
        service = ErnieBotService(api=my_custom_api)      # bring your own transport
    """

    def __init__(self, token: Optional[str] = None, timeout: Timeout = DEFAULT_TIMEOUT, *, api: ErnieBotApi | None = None):
        self.api = api if api is not None else self.build_api(token, timeout)

    @classmethod
    def from_env(cls, token: Optional[str] = None, timeout: Optional[float] = None) -> 'ErnieBotService':
        cfg = ClientConfig.from_env(token, timeout)
        return cls(api=cls.build_api(cfg.token, cfg.timeout, base_url=cfg.base_url))

    @staticmethod
    def execute(api_call: 'Future[T]') -> T:
        """Wait for ``api_call`` and return its result.

        An HTTP error whose body decodes into ``ApiError`` is raised as
        ``ApiHttpException``; with an empty or undecodable body the original
        ``requests.HTTPError`` propagates. Any other failure propagates as is.

        The access token travels in the query string, so the URL inside a
        re-raised ``HTTPError`` (and its message) contains it. Scrub it before
        logging such exceptions.
        """
        try:
            return api_call.result()
        except requests.HTTPError as e:
            resp = e.response
            if resp is None or not resp.content or not resp.content.strip():
                raise
            error = None
            try:
                error = _error_mapper.decode(ApiError, resp.content)
            except DecodeError as decode_err:
                logger.warning("Couldn't parse error body (HTTP %s): %s", resp.status_code, decode_err)
            if error is None:
                raise
            raise ApiHttpException(error, e, resp.status_code) from e

    @staticmethod
    def build_api(
        token: Optional[str],
        timeout: Timeout = DEFAULT_TIMEOUT,
        *,
        base_url: str = BASE_URL,
        connect_timeout: Timeout = 0,
        pool_size: int = DEFAULT_POOL_SIZE,
    ) -> ErnieBotApi:
        config = TransportConfig(read_timeout=timeout, connect_timeout=connect_timeout, pool_size=pool_size)
        session = _default_session(token, config)
        return ErnieBotApi(
            session,
            ErnieBotService.default_mapper(),
            base_url=base_url,
            timeout=config.requests_timeout(),
            max_workers=config.pool_size,
        )

    @staticmethod
    def default_mapper() -> JsonMapper:
        return JsonMapper()

    @staticmethod
    def default_session(token: Optional[str], timeout: Timeout = DEFAULT_TIMEOUT) -> requests.Session:
        return _default_session(token, TransportConfig(read_timeout=timeout))

    def create_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        return self.execute(self.api.create_chat_completion(request))

    def create_chat_completion_instant(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        return self.execute(self.api.create_chat_completion_instant(request))

    def create_chat_completion_pro(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        return self.execute(self.api.create_chat_completion_pro(request))

    def create_custom_chat_completion(self, model: str, request: ChatCompletionRequest) -> ChatCompletionResponse:
        return self.execute(self.api.create_custom_chat_completion(model, request))

    def create_embeddings(self, request: EmbeddingRequest) -> EmbeddingResponse:
        return self.execute(self.api.create_embeddings(request))

    def close(self) -> None:
        self.api.close()

    def __enter__(self) -> 'ErnieBotService':
        return self

    def __exit__(self, *exc) -> None:
        self.close()
