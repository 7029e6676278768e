import json
import threading
from concurrent.futures import Future
from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from erniebot_client import (
    ApiAuthError,
    ApiHttpException,
    ChatCompletionRequest,
    ChatMessage,
    EmbeddingRequest,
    ErnieBotApi,
    ErnieBotService,
)

CHAT_OK = {
    'id': 'as-123',
    'object': 'chat.completion',
    'created': 1700000000,
    'result': 'Hello there',
    'is_truncated': False,
    'need_clear_history': False,
    'usage': {'prompt_tokens': 3, 'completion_tokens': 2, 'total_tokens': 5},
}


def _chat(text='hi'):
    return ChatCompletionRequest(messages=[ChatMessage.user(text)])


def test_chat_completion_success(make_service):
    service, adapter = make_service(lambda r: (200, CHAT_OK))
    resp = service.create_chat_completion(_chat())
    assert resp.result == 'Hello there'
    assert resp.usage.total_tokens == 5
    sent = adapter.sent[0]
    assert sent.method == 'POST'
    assert urlparse(sent.url).path == '/rpc/2.0/ai_custom/v1/wenxinworkshop/chat/completions'
    assert json.loads(sent.body) == {'messages': [{'role': 'user', 'content': 'hi'}]}


def test_token_on_every_request(make_service):
    service, adapter = make_service(lambda r: (200, CHAT_OK), token='secret-42')
    service.create_chat_completion(_chat())
    service.create_chat_completion_pro(_chat())
    service.create_custom_chat_completion('my-model', _chat())
    assert len(adapter.sent) == 3
    for sent in adapter.sent:
        assert parse_qs(urlparse(sent.url).query)['access_token'] == ['secret-42']


def test_missing_token_fails_before_network(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError('network touched')
    monkeypatch.setattr(requests.Session, 'request', boom)
    with pytest.raises(ApiAuthError):
        ErnieBotService(None)


@pytest.mark.parametrize('token', ['', '   '])
def test_blank_token_is_still_sent(make_service, token):
    service, adapter = make_service(lambda r: (200, CHAT_OK), token=token)
    service.create_chat_completion(_chat())
    query = parse_qs(urlparse(adapter.sent[0].url).query, keep_blank_values=True)
    assert query['access_token'] == [token]


def test_structured_error_body(make_service):
    body = {'error_code': 100, 'error_msg': 'invalid request', 'type': 'InvalidRequest'}
    service, _ = make_service(lambda r: (400, body))
    with pytest.raises(ApiHttpException) as exc:
        service.create_chat_completion(_chat())
    err = exc.value
    assert err.error.code == 100
    assert err.error.message == 'invalid request'
    assert err.error.type == 'InvalidRequest'
    assert err.status_code == 400
    assert isinstance(err.cause, requests.HTTPError)
    assert err.__cause__ is err.cause


def test_error_body_with_extra_fields_still_structured(make_service):
    body = {'error_code': 17, 'error_msg': 'Open api daily request limit reached', 'log_id': 99}
    service, _ = make_service(lambda r: (429, body))
    with pytest.raises(ApiHttpException) as exc:
        service.create_chat_completion(_chat())
    assert exc.value.error.code == 17
    assert exc.value.error.type is None
    assert exc.value.status_code == 429


def test_empty_error_body_raises_original_http_error(make_service):
    service, _ = make_service(lambda r: (500, ''))
    with pytest.raises(requests.HTTPError) as exc:
        service.create_chat_completion(_chat())
    assert not isinstance(exc.value, ApiHttpException)
    assert exc.value.response.status_code == 500


def test_undecodable_error_body_raises_original_http_error(make_service):
    service, _ = make_service(lambda r: (502, '<html>Bad Gateway</html>'))
    with pytest.raises(requests.HTTPError) as exc:
        service.create_chat_completion(_chat())
    assert exc.value.response.status_code == 502


def test_connection_error_propagates_unchanged(make_service):
    def down(request):
        raise requests.ConnectionError('connection refused')
    service, _ = make_service(down)
    with pytest.raises(requests.ConnectionError, match='connection refused'):
        service.create_chat_completion(_chat())


def test_execute_returns_future_result():
    fut = Future()
    fut.set_result('done')
    assert ErnieBotService.execute(fut) == 'done'


@pytest.mark.parametrize('timeout', [0, timedelta(0)])
def test_zero_timeout_disables_read_timeout(make_service, timeout):
    service, adapter = make_service(lambda r: (200, CHAT_OK), timeout=timeout)
    service.create_chat_completion(_chat())
    assert adapter.timeouts == [(None, None)]


def test_default_timeout_applied_to_reads(make_service):
    service, adapter = make_service(lambda r: (200, CHAT_OK))
    service.create_chat_completion(_chat())
    connect, read = adapter.timeouts[0]
    assert connect is None
    assert read == 10.0


def test_concurrent_calls_do_not_mix_results(make_service):
    # both requests must be in flight at once before either is answered
    barrier = threading.Barrier(2, timeout=5)

    def echo(request):
        barrier.wait()
        content = json.loads(request.body)['messages'][0]['content']
        return 200, dict(CHAT_OK, result=f'echo:{content}')

    service, _ = make_service(echo)
    f1 = service.api.create_chat_completion(_chat('first'))
    f2 = service.api.create_chat_completion(_chat('second'))
    assert ErnieBotService.execute(f2).result == 'echo:second'
    assert ErnieBotService.execute(f1).result == 'echo:first'


def test_embeddings(make_service):
    body = {
        'id': 'as-emb',
        'object': 'embedding_list',
        'created': 1700000000,
        'data': [{'object': 'embedding', 'embedding': [0.1, 0.2], 'index': 0}],
        'usage': {'prompt_tokens': 2, 'total_tokens': 2},
    }
    service, adapter = make_service(lambda r: (200, body))
    resp = service.create_embeddings(EmbeddingRequest(input=['hello']))
    assert resp.data[0].embedding == [0.1, 0.2]
    assert urlparse(adapter.sent[0].url).path.endswith('/embeddings/embedding-v1')


def test_custom_api_bypasses_default_configuration():
    session = requests.Session()
    api = ErnieBotApi(session, base_url='https://example.test/')
    service = ErnieBotService(api=api)
    assert service.api is api
    assert session.auth is None
    service.close()


def test_from_env(monkeypatch):
    monkeypatch.setenv('ERNIEBOT_ACCESS_TOKEN', 'env-token')
    monkeypatch.setenv('ERNIEBOT_TIMEOUT', '0')
    monkeypatch.setenv('ERNIEBOT_BASE_URL', 'https://proxy.example.test')
    with ErnieBotService.from_env() as service:
        assert service.api.base_url == 'https://proxy.example.test/'
        assert service.api.timeout == (None, None)


def test_error_fields_in_success_body_are_visible(make_service):
    body = {'error_code': 336003, 'error_msg': 'the length of messages must be an odd number'}
    service, _ = make_service(lambda r: (200, body))
    resp = service.create_chat_completion(_chat())
    assert resp.result == ''
    assert resp.error_code == 336003
    assert resp.error_msg == 'the length of messages must be an odd number'


def test_build_api_connect_timeout_and_pool_size():
    api = ErnieBotService.build_api('tok', 30, connect_timeout=timedelta(seconds=3), pool_size=2)
    with ErnieBotService(api=api) as service:
        assert service.api.timeout == (3.0, 30.0)
        assert service.api.session.get_adapter('https://aip.baidubce.com/')._pool_maxsize == 2
        assert service.api._executor._max_workers == 2


def test_reraised_http_error_keeps_request_url(make_service):
    # the token is part of the URL, so the unmodified error text carries it
    service, _ = make_service(lambda r: (500, ''), token='s3cr3t-token')
    with pytest.raises(requests.HTTPError) as exc:
        service.create_chat_completion(_chat())
    assert 'access_token=s3cr3t-token' in str(exc.value)
