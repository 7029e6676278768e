from __future__ import annotations
import json
from typing import Any, Dict, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .exceptions import DecodeError

M = TypeVar('M', bound=BaseModel)


class JsonMapper:
    """Encodes and decodes wire models.

    Encoding uses wire names and drops fields that are ``None``. Decoding ignores
    unknown fields (see ``WireModel``). Error bodies go through the same mapper.
    """

    def encode(self, model: BaseModel) -> Dict[str, Any]:
        return model.model_dump(mode='json', by_alias=True, exclude_none=True)

    def dumps(self, model: BaseModel) -> str:
        return json.dumps(self.encode(model), ensure_ascii=False)

    def decode(self, model_cls: Type[M], payload: Union[str, bytes, Dict[str, Any]]) -> M:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise DecodeError(f"Invalid JSON for {model_cls.__name__}: {e}") from e
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object for {model_cls.__name__}, got {type(payload).__name__}")
        try:
            return model_cls.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(f"Payload does not match {model_cls.__name__}: {e.error_count()} error(s)") from e
