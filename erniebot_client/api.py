"""Declarative table of ERNIE Bot endpoints and the client that runs them.

Every endpoint method returns a ``concurrent.futures.Future`` right away; the
request itself runs on a small worker pool sized like the connection pool.
"""
from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, NamedTuple, Optional, Tuple, Type, Union
from urllib.parse import quote

import requests
from pydantic import BaseModel

from .models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
)
from .serialization import JsonMapper
from .transport import DEFAULT_POOL_SIZE

logger = logging.getLogger(__name__)

# wenxinworkshop host; older clients used https://api.baidu.com/
BASE_URL = 'https://aip.baidubce.com/'
_WENXIN = 'rpc/2.0/ai_custom/v1/wenxinworkshop'


class Endpoint(NamedTuple):
    method: str
    path: str
    request_type: Optional[Type[BaseModel]]
    response_type: Type[BaseModel]


ENDPOINTS: Dict[str, Endpoint] = {
    'chat_completions': Endpoint('POST', f'{_WENXIN}/chat/completions', ChatCompletionRequest, ChatCompletionResponse),
    'chat_eb_instant': Endpoint('POST', f'{_WENXIN}/chat/eb-instant', ChatCompletionRequest, ChatCompletionResponse),
    'chat_completions_pro': Endpoint('POST', f'{_WENXIN}/chat/completions_pro', ChatCompletionRequest, ChatCompletionResponse),
    'chat_custom': Endpoint('POST', f'{_WENXIN}/chat/{{model}}', ChatCompletionRequest, ChatCompletionResponse),
    'embedding_v1': Endpoint('POST', f'{_WENXIN}/embeddings/embedding-v1', EmbeddingRequest, EmbeddingResponse),
}


def build_path(template: str, params: Dict[str, Any]) -> str:
    try:
        return template.format(**{k: quote(str(v), safe='') for k, v in params.items()})
    except KeyError as e:
        raise ValueError(f"Missing path parameter {e.args[0]!r} for {template}") from None


class ErnieBotApi:
    """Runs ``ENDPOINTS`` against ``base_url`` using the given session.

    The session carries auth and pooling (see ``transport.default_session``);
    pass a custom one for full control over the transport.
    """

    def __init__(
        self,
        session: requests.Session,
        mapper: JsonMapper | None = None,
        base_url: str = BASE_URL,
        timeout: Tuple[Optional[float], Optional[float]] = (None, None),
        max_workers: int = DEFAULT_POOL_SIZE,
    ):
        self.session = session
        self.mapper = mapper or JsonMapper()
        self.base_url = base_url.rstrip('/') + '/'
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='erniebot')

    def call(self, operation: str, body: Union[BaseModel, Dict[str, Any], None] = None, **path_params: Any) -> Future:
        """Submit ``operation`` and return a future resolving to its response model.

        Unknown operations, missing path parameters and bodies of the wrong type
        fail here, before anything is sent.
        """
        try:
            endpoint = ENDPOINTS[operation]
        except KeyError:
            raise ValueError(f"Unknown operation: {operation}") from None
        path = build_path(endpoint.path, path_params)
        payload = self._coerce_body(endpoint, body)
        return self._executor.submit(self._dispatch, endpoint, path, payload)

    def create_chat_completion(self, request: ChatCompletionRequest) -> Future:
        return self.call('chat_completions', request)

    def create_chat_completion_instant(self, request: ChatCompletionRequest) -> Future:
        return self.call('chat_eb_instant', request)

    def create_chat_completion_pro(self, request: ChatCompletionRequest) -> Future:
        return self.call('chat_completions_pro', request)

    def create_custom_chat_completion(self, model: str, request: ChatCompletionRequest) -> Future:
        return self.call('chat_custom', request, model=model)

    def create_embeddings(self, request: EmbeddingRequest) -> Future:
        return self.call('embedding_v1', request)

    def _coerce_body(self, endpoint: Endpoint, body: Any) -> Optional[BaseModel]:
        if endpoint.request_type is None or body is None:
            return None
        if isinstance(body, dict):
            return endpoint.request_type.model_validate(body)
        if not isinstance(body, endpoint.request_type):
            raise TypeError(f"Expected {endpoint.request_type.__name__}, got {type(body).__name__}")
        return body

    def _dispatch(self, endpoint: Endpoint, path: str, body: Optional[BaseModel]) -> BaseModel:
        url = self.base_url + path
        data = self.mapper.dumps(body).encode('utf-8') if body is not None else None
        logger.debug('%s %s', endpoint.method, path)
        resp = self.session.request(endpoint.method, url, data=data, timeout=self.timeout)
        resp.raise_for_status()
        return self.mapper.decode(endpoint.response_type, resp.content)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self.session.close()

    def __enter__(self) -> 'ErnieBotApi':
        return self

    def __exit__(self, *exc) -> None:
        self.close()
