import json
import threading

import pytest
from requests import Response
from requests.adapters import BaseAdapter

from erniebot_client import ErnieBotService


class FakeAdapter(BaseAdapter):
    """Answers requests with ``handler(prepared_request) -> (status, body)``; records what was sent."""

    def __init__(self, handler):
        super().__init__()
        self.handler = handler
        self.sent = []
        self.timeouts = []
        self._lock = threading.Lock()

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        with self._lock:
            self.sent.append(request)
            self.timeouts.append(timeout)
        status, body = self.handler(request)
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        resp = Response()
        resp.status_code = status
        resp._content = body.encode('utf-8') if isinstance(body, str) else (body or b'')
        resp.headers['Content-Type'] = 'application/json'
        resp.url = request.url
        resp.request = request
        resp.reason = 'OK' if status < 400 else 'Error'
        return resp

    def close(self):
        pass


@pytest.fixture
def make_service():
    """Build a service whose session talks to a FakeAdapter instead of the network."""
    created = []

    def _make(handler, token='test-token', timeout=10):
        service = ErnieBotService(token, timeout)
        adapter = FakeAdapter(handler)
        service.api.session.mount('https://', adapter)
        created.append(service)
        return service, adapter

    yield _make
    for s in created:
        s.close()
