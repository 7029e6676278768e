from __future__ import annotations
from typing import Optional

from requests.auth import AuthBase
from requests.models import PreparedRequest

from .exceptions import ApiAuthError

TOKEN_PARAM = 'access_token'


class TokenAuth(AuthBase):
    """Adds the access token as a query parameter to every outgoing request."""

    def __init__(self, token: Optional[str]):
        if token is None:
            raise ApiAuthError('Token required')
        self._token = token

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        r.prepare_url(r.url, {TOKEN_PARAM: self._token})
        return r

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TokenAuth) and other._token == self._token

    def __hash__(self) -> int:
        return hash((type(self), self._token))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(token='***')"
