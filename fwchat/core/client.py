"""HTTP client for the Fireworks chat-completions endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional, Sequence

import httpx

from .decoder import StreamEvent, decode_stream
from .errors import ProtocolError, RequestError
from .messages import Message, ToolDefinition

logger = logging.getLogger(__name__)

API_URL = "https://api.fireworks.ai/inference/v1/chat/completions"
DEFAULT_MODEL = "accounts/fireworks/models/gpt-oss-20b"
DEFAULT_TIMEOUT = 300.0

# Generation parameters are fixed for every request.
GENERATION_PARAMS: Dict[str, Any] = {
    "max_tokens": 16384,
    "top_p": 1,
    "top_k": 40,
    "presence_penalty": 0,
    "frequency_penalty": 0,
    "temperature": 0.6,
}


class FireworksClient:
    """Streams chat completions and hides the wire protocol from callers.

    Args:
        api_key: Fireworks API key sent as a bearer token.
        tools: Tool definitions offered to the model. An empty sequence
            disables tool use entirely.
        model: Model identifier.
        api_url: Chat-completions endpoint.
        http_client: Pre-configured ``httpx.Client``; one is created (and
            owned) when omitted.
    """

    def __init__(
        self,
        api_key: str,
        tools: Sequence[ToolDefinition] = (),
        *,
        model: str = DEFAULT_MODEL,
        api_url: str = API_URL,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.model = model
        self.api_url = api_url
        self.tools = tuple(tools)
        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=httpx.Timeout(timeout, connect=30.0))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_payload(self, messages: Sequence[Message]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": self.model, **GENERATION_PARAMS}
        payload["messages"] = [m.to_dict() for m in messages]
        if self.tools:
            payload["tools"] = [t.to_dict() for t in self.tools]
        payload["stream"] = True
        return payload

    def stream_chat(self, messages: Sequence[Message]) -> Iterator[StreamEvent]:
        """Return the decoded event stream for one completion request.

        The payload is built immediately from *messages*; the request itself is
        sent when the returned iterator is first advanced.

        Raises (while iterating):
            RequestError: the endpoint returned a non-success status.
            ProtocolError: the body was empty or the transport failed.
        """
        payload = self.build_payload(messages)
        return decode_stream(self._iter_body(payload))

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "FireworksClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _iter_body(self, payload: Dict[str, Any]) -> Iterator[bytes]:
        logger.info(
            "POST %s (model=%s, messages=%d, tools=%d)",
            self.api_url,
            self.model,
            len(payload["messages"]),
            len(payload.get("tools", [])),
        )
        try:
            with self._http.stream("POST", self.api_url, json=payload, headers=self._headers) as response:
                if not response.is_success:
                    body = response.read().decode("utf-8", errors="replace")
                    logger.warning("Completion request failed with %d", response.status_code)
                    raise RequestError(response.status_code, response.reason_phrase, body)

                received = False
                for chunk in response.iter_bytes():
                    if chunk:
                        received = True
                        yield chunk
                if not received:
                    raise ProtocolError("No response body")
        except httpx.HTTPError as exc:
            # Transport, content-decoding and redirect failures alike leave no usable body.
            raise ProtocolError(f"Unreadable response: {exc}") from exc
