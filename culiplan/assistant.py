"""
Academic assistant backed by the Gemini generateContent REST API.

The assistant only reads: it receives a JSON snapshot of the curriculum and
the evaluation dates as its system instruction and answers free-text
questions. It never raises to the caller; every failure turns into a short
apology string so the CLI can print it like any other answer.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

import requests

from culiplan.config import ASSISTANT_ENDPOINT, ASSISTANT_MODEL, ASSISTANT_TIMEOUT, assistant_api_key
from culiplan.model import Course

logger = logging.getLogger(__name__)

NOT_CONNECTED = (
    "The virtual assistant is not connected (missing API key). Please look the information up manually."
)
CONNECTION_ERROR = "Could not reach the virtual assistant. Check your API key."
EMPTY_ANSWER = "Sorry, I could not generate an answer."

SYSTEM_TEMPLATE = """\
You are an academic assistant for a Hospitality and Culinary school.
Your job is to help teachers and students plan the {year} school year.
You have access to the following course data as JSON:
{context}

Rules:
1. Answer questions about exam dates, unit contents and course progress.
2. Be professional, concise and encouraging.
3. If a unit is delayed (status 'Delayed'), suggest strategies to recover time.
4. Use Markdown for lists and bold text.
"""

# One turn of a conversation: {"role": "user" | "model", "parts": [{"text": ...}]}
Message = dict[str, Any]


def build_context(courses: Iterable[Course], evaluations: Iterable[dict[str, Any]] = ()) -> str:
    """
    Read-only JSON snapshot the assistant reasons over.
    """
    return json.dumps(
        {"courses": [c.to_dict() for c in courses], "evaluations": list(evaluations)},
        ensure_ascii=False,
    )


def _extract_text(payload: Any) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()


class AssistantClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = ASSISTANT_MODEL,
        session: Optional[requests.Session] = None,
        timeout: float = ASSISTANT_TIMEOUT,
    ) -> None:
        self.api_key = api_key if api_key is not None else assistant_api_key()
        self.model = model
        self.session = session or requests.Session()
        self.timeout = timeout

    def ask(
        self,
        message: str,
        history: Optional[list[Message]] = None,
        context: str = "{}",
        year: str = "2025-2026",
    ) -> str:
        """
        Send `message` after the previous turns in `history` and return the answer text.
        """
        if not self.api_key:
            logger.warning("Assistant API key not configured")
            return NOT_CONNECTED

        body = {
            "contents": [*(history or []), {"role": "user", "parts": [{"text": message}]}],
            "systemInstruction": {"parts": [{"text": SYSTEM_TEMPLATE.format(year=year, context=context)}]},
        }
        url = ASSISTANT_ENDPOINT.format(model=self.model)

        try:
            resp = self.session.post(
                url,
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Assistant request failed: %s", exc)
            return CONNECTION_ERROR

        return _extract_text(payload) or EMPTY_ANSWER
