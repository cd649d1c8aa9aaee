import unittest
from unittest import mock

import requests

from voido.ai.client import build_payload, parse_suggestions, suggest_todos
from voido.core.errors import ExternalServiceError


def _response(payload: object = None, status: int = 200, *, bad_json: bool = False) -> mock.Mock:
    resp = mock.Mock()
    resp.status_code = status
    if status >= 400:
        err = requests.exceptions.HTTPError(f"{status}")
        err.response = resp
        resp.raise_for_status.side_effect = err
    else:
        resp.raise_for_status.return_value = None
    if bad_json:
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.json.return_value = payload
    return resp


def _gemini(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestParse(unittest.TestCase):
    def test_strips_bullets_and_numbers(self) -> None:
        text = "1. Book flights\n- Reserve hotel\n\n* **Pack bags**\n2) Renew passport\n"
        assert parse_suggestions(text) == ["Book flights", "Reserve hotel", "Pack bags", "Renew passport"]

    def test_payload_contains_prompt(self) -> None:
        body = build_payload("plan a trip")
        assert "plan a trip" in body["contents"][0]["parts"][0]["text"]


class TestSuggestTodos(unittest.TestCase):
    def test_missing_key(self) -> None:
        with mock.patch("voido.ai.client.requests.post") as post:
            r = suggest_todos("x", api_key="")
        assert isinstance(r.unwrap_err(), ExternalServiceError)
        post.assert_not_called()

    def test_success_uses_timeout(self) -> None:
        with mock.patch("voido.ai.client.requests.post", return_value=_response(_gemini("- a\n- b"))) as post:
            r = suggest_todos("x", api_key="k", model="m1", timeout=3)
        assert r.unwrap() == ["a", "b"]
        _, kwargs = post.call_args
        assert kwargs["timeout"] == 3
        assert kwargs["params"] == {"key": "k"}
        assert "m1:generateContent" in post.call_args.args[0]

    def test_timeout(self) -> None:
        with mock.patch("voido.ai.client.requests.post", side_effect=requests.exceptions.Timeout()):
            r = suggest_todos("x", api_key="k", timeout=1)
        assert "timed out" in str(r.unwrap_err())

    def test_connection_error(self) -> None:
        with mock.patch("voido.ai.client.requests.post", side_effect=requests.exceptions.ConnectionError("down")):
            r = suggest_todos("x", api_key="k")
        assert "failed" in str(r.unwrap_err())

    def test_http_error(self) -> None:
        with mock.patch("voido.ai.client.requests.post", return_value=_response(status=403)):
            r = suggest_todos("x", api_key="k")
        assert "HTTP 403" in str(r.unwrap_err())

    def test_bad_json(self) -> None:
        with mock.patch("voido.ai.client.requests.post", return_value=_response(bad_json=True)):
            r = suggest_todos("x", api_key="k")
        assert "invalid JSON" in str(r.unwrap_err())

    def test_malformed_payload(self) -> None:
        with mock.patch("voido.ai.client.requests.post", return_value=_response({"candidates": []})):
            r = suggest_todos("x", api_key="k")
        assert "Malformed" in str(r.unwrap_err())

    def test_empty_text(self) -> None:
        with mock.patch("voido.ai.client.requests.post", return_value=_response(_gemini("\n\n"))):
            r = suggest_todos("x", api_key="k")
        assert r.is_err()
