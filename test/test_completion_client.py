from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import VALID_KEY, completion, make_response
from travel_booking.clients.completion_client import CancelToken, CompletionClient, PromptSpec
from travel_booking.utils.config import DEFAULT_API_URL, DEFAULT_MODEL
from travel_booking.utils.errors import (
    CompletionTimeout,
    CredentialInvalid,
    CredentialMissing,
    EmptyCompletion,
    RateLimited,
    RequestCancelled,
    RequestFailed,
)


def test_prompt_spec_body():
    spec = PromptSpec("sys", "user", model="m", temperature=0.1, max_tokens=10)
    assert spec.to_body() == {
        "model": "m",
        "messages": [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "user"},
        ],
        "temperature": 0.1,
        "max_tokens": 10,
    }


def test_complete_returns_first_choice_text(client, http):
    http.post.return_value = completion("hello there")

    assert client.complete("sys", "hi") == "hello there"

    http.post.assert_called_once()
    args, kwargs = http.post.call_args
    assert args[0] == DEFAULT_API_URL
    assert kwargs["headers"]["Authorization"] == f"Bearer {VALID_KEY}"
    assert kwargs["timeout"] == 30.0
    assert kwargs["json"]["model"] == DEFAULT_MODEL
    assert kwargs["json"]["temperature"] == 0.2
    assert kwargs["json"]["max_tokens"] == 2000


def test_missing_key_fails_before_network(keyless_client, http, notifier):
    with pytest.raises(CredentialMissing):
        keyless_client.complete("sys", "hi")
    http.post.assert_not_called()
    assert len(notifier.notices) == 1


def test_401_raises_credential_invalid_with_one_notice(client, http, notifier):
    http.post.return_value = make_response(401, {"error": {"message": "Invalid API key"}})

    with pytest.raises(CredentialInvalid):
        client.complete("sys", "hi")

    assert len(notifier.notices) == 1
    assert notifier.notices[0].level == "error"
    assert http.post.call_count == 1


def test_429_raises_rate_limited(client, http):
    http.post.return_value = make_response(429, {})
    with pytest.raises(RateLimited):
        client.complete("sys", "hi")


def test_other_status_uses_server_message(client, http, notifier):
    http.post.return_value = make_response(500, {"error": {"message": "upstream exploded"}})

    with pytest.raises(RequestFailed) as exc_info:
        client.complete("sys", "hi")

    assert exc_info.value.status_code == 500
    assert "upstream exploded" in str(exc_info.value)
    assert len(notifier.notices) == 1


def test_other_status_without_json_body(client, http):
    http.post.return_value = make_response(502, text="Bad gateway")
    with pytest.raises(RequestFailed, match="API error: 502"):
        client.complete("sys", "hi")


def test_timeout(client, http, notifier):
    http.post.side_effect = requests.Timeout("slow")
    with pytest.raises(CompletionTimeout):
        client.complete("sys", "hi")
    assert len(notifier.notices) == 1


def test_slow_response_counts_as_timeout(client, http, notifier):
    http.post.return_value = completion("late")
    with patch("travel_booking.clients.completion_client.monotonic", side_effect=[0.0, 31.0]):
        with pytest.raises(CompletionTimeout, match="limit is 30s"):
            client.complete("sys", "hi")
    assert [n.title for n in notifier.notices] == ["Request Timed Out"]


def test_connection_error_is_request_failed(client, http):
    http.post.side_effect = requests.ConnectionError("refused")
    with pytest.raises(RequestFailed):
        client.complete("sys", "hi")


@pytest.mark.parametrize("body", [
    {"choices": []},
    {},
    {"choices": [{"message": {}}]},
    {"choices": ["text"]},
])
def test_no_usable_choice_is_empty_completion(client, http, body):
    http.post.return_value = make_response(200, body)
    with pytest.raises(EmptyCompletion):
        client.complete("sys", "hi")


def test_cancelled_before_call_sends_nothing(client, http):
    token = CancelToken()
    token.cancel()
    with pytest.raises(RequestCancelled):
        client.complete("sys", "hi", cancel_token=token)
    http.post.assert_not_called()


def test_cancelled_while_in_flight_discards_result(client, http, notifier):
    token = CancelToken()

    def post(*args, **kwargs):
        token.cancel()
        return completion("late answer")

    http.post.side_effect = post
    with pytest.raises(RequestCancelled):
        client.complete("sys", "hi", cancel_token=token)
    assert notifier.notices == []


def test_explicit_api_key_overrides_stored(client, http):
    http.post.return_value = completion("ok")
    client.complete("sys", "hi", api_key="pk-override")
    assert http.post.call_args.kwargs["headers"]["Authorization"] == "Bearer pk-override"


def test_notifier_sink_receives_notice(key_store, settings, http):
    sink = MagicMock()
    from travel_booking.utils.notifications import Notifier

    client = CompletionClient(key_store, settings, Notifier(sink=sink), session=http)
    with pytest.raises(CredentialMissing):
        client.complete("sys", "hi")
    sink.assert_called_once()
