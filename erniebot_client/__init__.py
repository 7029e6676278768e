"""Client for the Baidu ERNIE Bot (wenxinworkshop) HTTP API.

Usage example:
    from erniebot_client import ErnieBotService, ChatCompletionRequest, ChatMessage
    service = ErnieBotService.from_env()
    resp = service.create_chat_completion(ChatCompletionRequest(messages=[ChatMessage.user('Hello')]))
    print(resp.result)
"""
from .api import ENDPOINTS, ErnieBotApi  # noqa: F401
from .exceptions import ApiAuthError, ApiHttpException, ApiRequestError, DecodeError  # noqa: F401
from .models import (  # noqa: F401
    ApiError,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatFunction,
    ChatMessage,
    Embedding,
    EmbeddingRequest,
    EmbeddingResponse,
    FunctionCall,
    Usage,
)
from .service import ErnieBotService  # noqa: F401
