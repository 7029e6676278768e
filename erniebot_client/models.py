"""Request/response shapes exchanged with the ERNIE Bot API.

Field names follow Python conventions; ``WireModel`` maps them to snake_case
on the wire, ignores unknown fields on decode and lets callers construct models
by attribute name.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_snake


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_snake,
        populate_by_name=True,
        extra='ignore',
    )


class ApiError(WireModel):
    """Error payload returned by the service on a failed call."""
    code: Optional[int] = Field(default=None, alias='error_code')
    message: Optional[str] = Field(default=None, alias='error_msg')
    type: Optional[str] = None


class FunctionCall(WireModel):
    name: str
    arguments: str
    thoughts: Optional[str] = None


class ChatMessage(WireModel):
    role: str
    content: Optional[str] = None
    name: Optional[str] = None
    function_call: Optional[FunctionCall] = None

    @classmethod
    def user(cls, content: str) -> 'ChatMessage':
        return cls(role='user', content=content)

    @classmethod
    def assistant(cls, content: str) -> 'ChatMessage':
        return cls(role='assistant', content=content)


class ChatFunction(WireModel):
    name: str
    description: str
    parameters: Dict[str, Any]
    responses: Optional[Dict[str, Any]] = None
    examples: Optional[List[List[ChatMessage]]] = None


class ChatCompletionRequest(WireModel):
    messages: List[ChatMessage]
    functions: Optional[List[ChatFunction]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    penalty_score: Optional[float] = None
    system: Optional[str] = None
    stop: Optional[List[str]] = None
    disable_search: Optional[bool] = None
    enable_citation: Optional[bool] = None
    user_id: Optional[str] = None


class Usage(WireModel):
    prompt_tokens: int = 0
    completion_tokens: Optional[int] = None
    total_tokens: int = 0


class ChatCompletionResponse(WireModel):
    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    sentence_id: Optional[int] = None
    is_end: Optional[bool] = None
    is_truncated: Optional[bool] = None
    result: str = ''
    need_clear_history: Optional[bool] = None
    ban_round: Optional[int] = None
    function_call: Optional[FunctionCall] = None
    usage: Optional[Usage] = None
    # some failures come back as HTTP 200 with these set and no result
    error_code: Optional[int] = None
    error_msg: Optional[str] = None


class EmbeddingRequest(WireModel):
    input: List[str]
    user_id: Optional[str] = None


class Embedding(WireModel):
    object: str = 'embedding'
    embedding: List[float]
    index: int


class EmbeddingResponse(WireModel):
    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    data: List[Embedding] = Field(default_factory=list)
    usage: Optional[Usage] = None
    error_code: Optional[int] = None
    error_msg: Optional[str] = None
