"""Gemini ``generateContent`` client for todo suggestions."""

import re
from typing import Any

import requests
from pyresults import Err, Ok, Result

from voido.core.errors import ExternalServiceError
from voido.util.dirs import DEFAULT_AI_MODEL
from voido.util.logger import setup_logger

logger = setup_logger("voido")

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_TIMEOUT_SEC = 20.0

INSTRUCTION = (
    "You help plan a todo list. Reply with one short actionable todo per line, "
    "no numbering, no extra commentary.\n\nRequest: "
)

_BULLET_RE = re.compile(r"^\s*(?:[-*•+]|\d+[.)])\s*")


def build_payload(prompt: str) -> dict[str, Any]:
    return {"contents": [{"parts": [{"text": INSTRUCTION + prompt}]}]}


def parse_suggestions(text: str) -> list[str]:
    """One suggestion per non-empty line, list bullets and numbering stripped."""
    out: list[str] = []
    for line in text.splitlines():
        item = _BULLET_RE.sub("", line).strip().strip("*").strip()
        if item:
            out.append(item)
    return out


def _candidate_text(payload: Any) -> Result[str, str]:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
        text = "".join(str(p.get("text", "")) for p in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        return Err(f"Malformed response: {e!r}")
    return Ok(text)


def suggest_todos(
    prompt: str,
    *,
    api_key: str,
    model: str = DEFAULT_AI_MODEL,
    timeout: float = DEFAULT_TIMEOUT_SEC,
) -> Result[list[str], ExternalServiceError]:
    if not api_key:
        return Err(ExternalServiceError("No API key configured (run `voido apikey KEY`)"))
    if not prompt.strip():
        return Err(ExternalServiceError("Empty prompt"))

    url = API_URL.format(model=model)
    try:
        resp = requests.post(
            url,
            params={"key": api_key},
            json=build_payload(prompt),
            timeout=timeout,
        )
        resp.raise_for_status()
        payload = resp.json()
    except requests.exceptions.Timeout:
        msg = f"AI request timed out after {timeout:g}s"
        logger.warning(msg)
        return Err(ExternalServiceError(msg))
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        msg = f"AI service returned HTTP {status}"
        logger.warning(msg)
        return Err(ExternalServiceError(msg))
    except ValueError as e:
        # resp.json() の decode 失敗
        msg = f"AI service returned invalid JSON: {e!s}"
        logger.warning(msg)
        return Err(ExternalServiceError(msg))
    except requests.exceptions.RequestException as e:
        msg = f"AI request failed: {e!s}"
        logger.warning(msg)
        return Err(ExternalServiceError(msg))

    match _candidate_text(payload):
        case Ok(text):
            suggestions = parse_suggestions(text)
            if not suggestions:
                return Err(ExternalServiceError("AI service returned no suggestions"))
            return Ok(suggestions)
        case Err(e):
            logger.warning(e)
            return Err(ExternalServiceError(e))
        case _:
            return Err(ExternalServiceError("Unexpected response"))
