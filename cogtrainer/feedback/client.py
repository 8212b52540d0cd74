from __future__ import annotations

"""Chat-completions client for encouraging session feedback."""

import os
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..errors import FeedbackUnavailable
from ..results.schema import SessionRecord

DEFAULT_API_URL = "https://api.x.ai/v1/chat/completions"
DEFAULT_MODEL = "grok-beta"

SYSTEM_PROMPT = (
    "You are an expert cognitive training coach who provides personalized, "
    "encouraging feedback to help children improve their brain training performance."
)


def build_prompt(record: SessionRecord, history: Sequence[SessionRecord]) -> str:
    previous = [
        f"- Score: {r.final_score}, Accuracy: {r.accuracy * 100:.1f}%" for r in history[-5:]
    ] or ["No previous scores available"]
    lines = [
        "A player just completed a brain training game.",
        "",
        "Game Details:",
        f"- Game Type: {record.game_kind}",
        f"- Score: {record.final_score}",
        f"- Accuracy: {record.accuracy * 100:.1f}%",
        f"- Time Spent: {record.time_spent_seconds} seconds",
        f"- Level: {record.final_level}",
        f"- Difficulty: {record.difficulty_tag}",
        "",
        "Previous Performance:",
        *previous,
        "",
        "Give a short performance summary, one strength, one thing to practise and a "
        "motivational message. Keep the tone encouraging and under 120 words.",
    ]
    return "\n".join(lines)


class FeedbackClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        api_url: str = DEFAULT_API_URL,
        model: str = DEFAULT_MODEL,
        api_key_env: str = "GROK_API_KEY",
        timeout_s: float = 10.0,
        max_tokens: int = 500,
        temperature: float = 0.7,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key or os.environ.get(api_key_env)
        self.api_url = api_url
        self.model = model
        self.max_tokens = int(max_tokens)
        self.temperature = float(temperature)
        self._client = httpx.Client(timeout=timeout_s, transport=transport)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], **kwargs: Any) -> "FeedbackClient":
        fb = cfg.get("feedback", {})
        return cls(
            api_url=fb.get("api_url", DEFAULT_API_URL),
            model=fb.get("model", DEFAULT_MODEL),
            api_key_env=fb.get("api_key_env", "GROK_API_KEY"),
            timeout_s=float(fb.get("timeout_s", 10.0)),
            max_tokens=int(fb.get("max_tokens", 500)),
            temperature=float(fb.get("temperature", 0.7)),
            **kwargs,
        )

    def request_feedback(self, record: SessionRecord, history: Sequence[SessionRecord]) -> str:
        if not self.api_key:
            raise FeedbackUnavailable("feedback API key is not configured")
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(record, history)},
        ]
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            r = self._client.post(self.api_url, headers=headers, json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as http_err:
            raise FeedbackUnavailable(f"feedback service returned {http_err.response.status_code}") from http_err
        except httpx.RequestError as net_err:
            raise FeedbackUnavailable(f"feedback request failed: {net_err}") from net_err
        try:
            text = r.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise FeedbackUnavailable(f"unexpected feedback response: {r.text[:200]}") from exc
        if not isinstance(text, str) or not text.strip():
            raise FeedbackUnavailable("feedback response was empty")
        return text.strip()

    def close(self) -> None:
        self._client.close()
