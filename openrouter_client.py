from __future__ import annotations
import logging
import os
import requests
from typing import List, Optional, Dict, Any
from dotenv import load_dotenv
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-2.5-flash"

class OpenRouterClient:
    """
    Minimal OpenRouter chat client.
    Docs: https://openrouter.ai/docs/api-reference/chat-completion

    A missing key is reported on the first chat() call, not at construction,
    so the server can start without credentials and surface the failure
    through the wizard's notice.
    """
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        referer: Optional[str] = None,
        title: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        self.api_url = api_url or os.getenv("OPENROUTER_URL", DEFAULT_API_URL)
        self.model = model or os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL)

        # Optional attribution headers recommended by OpenRouter
        self.referer = referer or os.getenv("APP_REFERER")
        self.title = title or os.getenv("APP_TITLE")
        self.timeout = timeout if timeout is not None else float(os.getenv("OPENROUTER_TIMEOUT", "60"))

        masked = (self.api_key[:6] + "..." + self.api_key[-4:]) if self.api_key and len(self.api_key) > 10 else str(bool(self.api_key))
        logger.info(
            "OpenRouter client: key=%s model=%s url=%s timeout=%.0fs",
            masked, self.model, self.api_url, self.timeout,
        )

    def _headers(self) -> Dict[str, str]:
        h = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.referer:
            h["HTTP-Referer"] = self.referer
        if self.title:
            h["X-Title"] = self.title
        return h

    def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.2,
        extra: Optional[Dict[str, Any]] = None,
    ) -> str:
        if not self.api_key:
            raise RuntimeError("Missing OPENROUTER_API_KEY")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if extra:
            payload.update(extra)

        resp = requests.post(self.api_url, json=payload, headers=self._headers(), timeout=self.timeout)

        if resp.status_code != 200:
            raise RuntimeError(f"OpenRouter error {resp.status_code}: {resp.text}")

        data = resp.json()
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise RuntimeError(f"OpenRouter returned no message content: {data!r}") from e
