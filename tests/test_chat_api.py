"""Tests for the chat API adapter."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from ubizy.adapters.chat_api import ChatAPIService, ChatServiceError
from ubizy.config import Config


@pytest.fixture
def config():
    return Config(chat_api_url="https://chat.example/v1/chat/completions", chat_api_key="sk-test", chat_timeout=5)


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def make_response(status_code=200, payload=None, lines=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.json.return_value = payload
    resp.iter_lines.return_value = iter(lines or [])
    resp.__enter__.return_value = resp
    return resp


MESSAGES = [{"role": "system", "content": "Be brief."}, {"role": "user", "content": "Hi"}]


class TestGenerate:
    def test_posts_conversation(self, config, session):
        session.post.return_value = make_response(payload={"choices": [{"message": {"content": "Hello!"}}]})
        service = ChatAPIService(config, session=session)

        assert service.generate(MESSAGES) == "Hello!"

        args, kwargs = session.post.call_args
        assert args[0] == "https://chat.example/v1/chat/completions"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["json"] == {"model": "gpt-4-turbo", "messages": MESSAGES, "stream": False}
        assert kwargs["timeout"] == 5

    def test_http_error(self, config, session):
        session.post.return_value = make_response(status_code=500, text="oops")
        service = ChatAPIService(config, session=session)

        with pytest.raises(ChatServiceError, match="500"):
            service.generate(MESSAGES)

    def test_timeout(self, config, session):
        session.post.side_effect = requests.Timeout()
        service = ChatAPIService(config, session=session)

        with pytest.raises(ChatServiceError, match="timed out after 5s"):
            service.generate(MESSAGES)

    def test_connection_error(self, config, session):
        session.post.side_effect = requests.ConnectionError("refused")
        service = ChatAPIService(config, session=session)

        with pytest.raises(ChatServiceError, match="unreachable"):
            service.generate(MESSAGES)

    def test_unexpected_body(self, config, session):
        session.post.return_value = make_response(payload={"error": "nope"})
        service = ChatAPIService(config, session=session)

        with pytest.raises(ChatServiceError, match="Unexpected"):
            service.generate(MESSAGES)

    def test_missing_api_key(self, session):
        service = ChatAPIService(Config(chat_api_key=""), session=session)

        with pytest.raises(ChatServiceError, match="No API key"):
            service.generate(MESSAGES)
        session.post.assert_not_called()


class TestStream:
    def test_yields_deltas(self, config, session):
        lines = [
            "data: " + json.dumps({"choices": [{"delta": {"role": "assistant"}}]}),
            "",
            "data: " + json.dumps({"choices": [{"delta": {"content": "Hel"}}]}),
            ": keep-alive",
            "data: " + json.dumps({"choices": [{"delta": {"content": "lo"}}]}),
            "data: [DONE]",
            "data: " + json.dumps({"choices": [{"delta": {"content": "ignored"}}]}),
        ]
        session.post.return_value = make_response(lines=lines)
        service = ChatAPIService(config, session=session)

        assert list(service.stream(MESSAGES)) == ["Hel", "lo"]
        assert session.post.call_args.kwargs["stream"] is True
        assert session.post.call_args.kwargs["json"]["stream"] is True

    def test_bad_chunk(self, config, session):
        session.post.return_value = make_response(lines=["data: {not json"])
        service = ChatAPIService(config, session=session)

        with pytest.raises(ChatServiceError, match="chunk"):
            list(service.stream(MESSAGES))

    def test_connection_drop_mid_stream(self, config, session):
        def broken_lines(decode_unicode=False):
            yield "data: " + json.dumps({"choices": [{"delta": {"content": "Hel"}}]})
            raise requests.exceptions.ChunkedEncodingError("connection broken")

        resp = make_response()
        resp.iter_lines.side_effect = broken_lines
        session.post.return_value = resp
        service = ChatAPIService(config, session=session)

        chunks = []
        with pytest.raises(ChatServiceError, match="interrupted"):
            for chunk in service.stream(MESSAGES):
                chunks.append(chunk)
        assert chunks == ["Hel"]
