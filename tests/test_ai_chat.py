from unittest import mock

import pytest
import requests

from community import ai

pytestmark = pytest.mark.django_db


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def fake_response(data=None, status_error=None, bad_json=False):
    response = mock.Mock()
    if status_error:
        response.raise_for_status.side_effect = status_error
    if bad_json:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = data
    return response


@pytest.fixture
def gemini(monkeypatch):
    post = mock.Mock(return_value=fake_response(gemini_reply("That sounds heavy. What's weighing on you most?")))
    monkeypatch.setattr("community.ai.requests.post", post)
    return post


def test_extract_text_joins_parts():
    data = {"candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "there"}]}}]}
    assert ai.extract_text(data) == "Hello there"


@pytest.mark.parametrize("data", [
    {},
    {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}},
    {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
])
def test_extract_text_rejects_unusable_payloads(data):
    with pytest.raises(ai.AIServiceError) as exc:
        ai.extract_text(data)
    assert exc.value.status == 502


def test_generate_reply_without_key(settings):
    settings.GEMINI_API_KEY = ""
    with pytest.raises(ai.AIServiceError) as exc:
        ai.generate_reply("hi")
    assert exc.value.status == 503


def test_generate_reply_sends_key_model_and_timeout(settings, gemini):
    settings.GEMINI_MODEL = "gemini-test"
    settings.GEMINI_TIMEOUT = 7
    assert ai.generate_reply("prompt text").startswith("That sounds heavy")

    args, kwargs = gemini.call_args
    assert args[0].endswith("/models/gemini-test:generateContent")
    assert kwargs["params"] == {"key": "test-key"}
    assert kwargs["timeout"] == 7
    assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "prompt text"


@pytest.mark.parametrize("side_effect", [
    requests.Timeout("slow"),
    requests.ConnectionError("down"),
])
def test_generate_reply_transport_errors(monkeypatch, side_effect):
    monkeypatch.setattr("community.ai.requests.post", mock.Mock(side_effect=side_effect))
    with pytest.raises(ai.AIServiceError) as exc:
        ai.generate_reply("hi")
    assert exc.value.status == 502


def test_generate_reply_http_error_and_bad_json(monkeypatch):
    error = requests.HTTPError("500", response=mock.Mock(status_code=500))
    monkeypatch.setattr("community.ai.requests.post", mock.Mock(return_value=fake_response(status_error=error)))
    with pytest.raises(ai.AIServiceError):
        ai.generate_reply("hi")

    monkeypatch.setattr("community.ai.requests.post", mock.Mock(return_value=fake_response(bad_json=True)))
    with pytest.raises(ai.AIServiceError):
        ai.generate_reply("hi")


def test_generate_reply_accepts_session():
    session = mock.Mock()
    session.post.return_value = fake_response(gemini_reply("hi from session"))
    assert ai.generate_reply("hi", session=session) == "hi from session"
    session.post.assert_called_once()


def test_ai_chat_success(client, gemini):
    history = [{"sender": "user", "content": "hey"}] * 4
    response = client.post(
        "/api/ai-chat",
        {"message": "I'm anxious about work", "conversation_history": history},
        content_type="application/json",
    )
    assert response.status_code == 200
    body = response.json()
    assert body["response"].startswith("That sounds heavy")
    assert body["is_crisis"] is False
    assert len(body["suggested_responses"]) == 3
    assert body["emotions"] == ["anxiety", "work"]
    assert body["homework"]["title"] == "Simple Breathing Space"
    assert body["should_suggest_assessment"] is False


def test_ai_chat_crisis_never_calls_model(client, gemini):
    response = client.post("/api/ai-chat", {"message": "I want to end my life"}, content_type="application/json")
    assert response.status_code == 200
    body = response.json()
    assert body["is_crisis"] is True
    assert "988" in body["response"]
    gemini.assert_not_called()


def test_ai_chat_requires_message(client):
    response = client.post("/api/ai-chat", {"message": "   "}, content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == "message is required"


def test_ai_chat_rejects_non_list_history(client):
    response = client.post(
        "/api/ai-chat", {"message": "hi", "conversation_history": "hey"}, content_type="application/json"
    )
    assert response.status_code == 400


def test_ai_chat_upstream_failure_returns_fallback(client, monkeypatch):
    monkeypatch.setattr("community.ai.requests.post", mock.Mock(side_effect=requests.ConnectionError("down")))
    response = client.post("/api/ai-chat", {"message": "hello"}, content_type="application/json")
    assert response.status_code == 502
    body = response.json()
    assert body["response"] == ai.FALLBACK_RESPONSE
    assert "error" in body


def test_ai_chat_unexpected_error_is_500(client, monkeypatch):
    monkeypatch.setattr("community.ai.generate_reply", mock.Mock(side_effect=KeyError("parts")))
    response = client.post("/api/ai-chat", {"message": "hello"}, content_type="application/json")
    assert response.status_code == 500
    assert response.json()["response"] == ai.FALLBACK_RESPONSE


def test_ai_chat_unconfigured_is_503(client, settings, gemini):
    settings.GEMINI_API_KEY = ""
    response = client.post("/api/ai-chat", {"message": "hello"}, content_type="application/json")
    assert response.status_code == 503
    gemini.assert_not_called()
