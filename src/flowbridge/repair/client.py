"""httpx client for an OpenAI-compatible chat-completions endpoint."""
from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from flowbridge.config import RepairConfig
from flowbridge.repair.errors import (
    EmptyResponseError,
    RepairError,
    RepairNetworkError,
    RepairTimeoutError,
    SchemaValidationError,
    error_from_status_code,
)
from flowbridge.repair.prompt import SYSTEM_PROMPT
from flowbridge.repair.schema import validate_semantic_response

__all__ = ["RepairClient", "extract_json"]

logger = logging.getLogger(__name__)

_COMPLETIONS_PATH = "/chat/completions"


def extract_json(text: str) -> str | None:
    """The span from the first ``{`` to the last ``}``, if there is one."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


class RepairClient:
    """Requests schema-valid repair responses from the configured model.

    Errors are mapped into the :mod:`flowbridge.repair.errors` hierarchy.
    Pass *http_client* to supply a preconfigured :class:`httpx.Client`
    (tests use one backed by :class:`httpx.MockTransport`).
    """

    def __init__(self, config: RepairConfig, http_client: httpx.Client | None = None) -> None:
        self._config = config
        self._client = http_client or httpx.Client(
            base_url=config.base_url.rstrip("/"),
            headers={
                "authorization": f"Bearer {config.api_key}",
                "content-type": "application/json",
                "x-title": "flowbridge",
            },
            timeout=httpx.Timeout(config.timeout),
        )

    def _build_body(self, prompt: str, corrective: str | None) -> dict[str, Any]:
        content = f"{prompt}\n\n{corrective}" if corrective else prompt
        return {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "stream": False,
            "reasoning": {"effort": self._config.reasoning_effort},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": content},
            ],
        }

    def _post(self, body: dict[str, Any]) -> httpx.Response:
        try:
            response = self._client.post(_COMPLETIONS_PATH, json=body)
        except httpx.TimeoutException as exc:
            raise RepairTimeoutError(f"Request timed out: {exc}", cause=exc) from exc
        except httpx.HTTPError as exc:
            raise RepairNetworkError(f"Network error: {exc}", cause=exc) from exc

        if response.status_code >= 300:
            try:
                raw = response.json()
            except ValueError:
                raw = None
            raise error_from_status_code(
                response.status_code,
                f"Claude semantic recovery failed: {response.status_code} {response.text}",
                raw=raw if isinstance(raw, dict) else None,
            )
        return response

    def request_semantic_response(self, prompt: str, corrective: str | None = None) -> dict[str, Any]:
        """Send one completion request and return the validated JSON object.

        Raises:
            SchemaValidationError: The content is not JSON or breaks the schema.
            RepairError: Any other failure (timeout, transport, HTTP status).
        """
        response = self._post(self._build_body(prompt, corrective))
        try:
            data = response.json()
        except ValueError as exc:
            raise RepairError(f"Completion body is not JSON: {exc}", cause=exc) from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise EmptyResponseError("Claude returned empty content.")

        if isinstance(content, str):
            text = extract_json(content) or content
        else:
            text = json.dumps(content)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SchemaValidationError([str(exc)], cause=exc) from exc

        errors = validate_semantic_response(parsed)
        if errors:
            logger.debug("Repair response failed validation: %s", errors)
            raise SchemaValidationError(errors)
        return parsed

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()
