"""Client wrapper for a non-streaming text-generation endpoint."""

from __future__ import annotations

import logging
from typing import Dict

import requests

from .config import GenerationConfig
from .errors import BackendError, BackendUnavailable

logger = logging.getLogger(__name__)


class GenerationClient:
    """Thin wrapper around an Ollama-style ``/api/generate`` endpoint."""

    def __init__(self, config: GenerationConfig) -> None:
        self.config = config

    def complete(self, prompt: str) -> str:
        """Return the completion text for ``prompt``.

        Raises :class:`BackendUnavailable` when the backend cannot be reached
        in time and :class:`BackendError` when it answers with a non-success
        status or a payload without a ``response`` string.
        """
        payload: Dict[str, object] = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
        }
        if self.config.options:
            payload["options"] = dict(self.config.options)

        logger.info("Requesting completion from %s using model %s", self.config.endpoint, self.config.model)
        try:
            response = requests.post(
                self.config.endpoint,
                json=payload,
                timeout=self.config.request_timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise BackendUnavailable(f"Generation backend unreachable: {exc}") from exc
        except requests.RequestException as exc:
            raise BackendError(f"Generation request failed: {exc}") from exc

        if not response.ok:
            raise BackendError(f"Generation backend returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise BackendError("Generation backend returned a non-JSON body") from exc

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise BackendError("Generation payload has no 'response' text")

        logger.debug("Received completion of %d character(s)", len(text))
        return text
