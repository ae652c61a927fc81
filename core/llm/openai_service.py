"""
OpenAI Service - LLM implementation using OpenAI API.

Provides embeddings, single-shot and streamed text generation, and
structured data extraction.
"""
from typing import Dict, Any, List, Optional, Tuple, Iterator, Callable
import json
import logging
import copy
import re

import openai
from openai import OpenAI
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import RetryCallState
from core.exceptions import UpstreamModelError
from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import JOB_DATA_EXTRACTION_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------

TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Transient provider error (attempt %s). Waiting %.1fs before retry. Details: %s",
        retry_state.attempt_number, wait, exc,
    )


def _parse_reset_duration(value: str) -> float:
    """Parse a reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    units = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
    return sum(float(amount) * units[unit] for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value))


def _wait_from_rate_limit_headers(exc: openai.RateLimitError) -> float:
    """Longest wait declared by retry-after / x-ratelimit-reset-* headers, 0.0 if none."""
    headers = getattr(getattr(exc, "response", None), "headers", None)
    if not headers:
        return 0.0

    candidates: List[float] = []
    retry_after = headers.get("retry-after", "")
    if retry_after:
        try:
            candidates.append(float(retry_after))
        except ValueError:
            logger.debug(f"Ignoring non-numeric retry-after header: {retry_after}")

    for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
        parsed = _parse_reset_duration(headers.get(header, ""))
        if parsed > 0:
            candidates.append(parsed)

    return max(candidates) if candidates else 0.0


def _wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Honour server-declared rate-limit timers, else capped exponential backoff."""
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = _wait_from_rate_limit_headers(exc)
        if wait > 0:
            return min(wait, 120)  # safety cap at 2 min

    exp = wait_exponential(multiplier=1, min=2, max=60)
    return exp(retry_state)


def _llm_retrying(max_attempts: int) -> Retrying:
    """Return a tenacity Retrying controller for provider calls."""
    return Retrying(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        wait=_wait_respecting_retry_after,
        stop=stop_after_attempt(max(1, max_attempts)),
        before_sleep=_log_retry,
        reraise=True,
    )


def _unwrap_schema_spec(spec: Dict[str, Any]) -> Tuple[str, bool, Dict[str, Any]]:
    """Unwrap a schema spec to extract name, strict flag, and raw JSON schema.

    Args:
        spec: Either a wrapped spec {'name': str, 'strict': bool, 'schema': {...}}
              or a raw JSON schema dict

    Returns:
        Tuple of (name, strict, raw_schema)
    """
    if isinstance(spec, dict) and "schema" in spec and "name" in spec:
        return spec.get("name", "extraction_response"), bool(spec.get("strict", False)), spec["schema"]
    return "extraction_response", False, spec


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    Embeddings use the configured dimension; structured extraction uses
    JSON Schema mode. Provider failures are raised as UpstreamModelError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        max_attempts: int = 1
    ):
        client_kwargs = {}
        if api_key:
            client_kwargs['api_key'] = api_key
        if base_url:
            client_kwargs['base_url'] = base_url
        if timeout:
            client_kwargs['timeout'] = timeout
        # Retries are owned by tenacity below, not the SDK
        client_kwargs['max_retries'] = 0

        self.client = OpenAI(**client_kwargs)

        self.model_config = model_config or {}
        self.text_model = self.model_config.get('text_model', 'gpt-4o-mini')
        self.embedding_model = self.model_config.get('embedding_model', 'text-embedding-3-small')
        self.embedding_dimensions = self.model_config.get('embedding_dimensions', 1536)
        self.extraction_temperature = self.model_config.get('extraction_temperature', 0.0)
        self._retrying = _llm_retrying(max_attempts)

    def _call(self, operation: str, fn: Callable[..., Any], **kwargs) -> Any:
        try:
            return self._retrying(fn, **kwargs)
        except openai.OpenAIError as e:
            logger.error(f"{operation} failed: {e}")
            raise UpstreamModelError(f"{operation} failed: {e}") from e

    def generate_embedding(self, text: str) -> List[float]:
        """Generate embedding vector for text."""
        response = self._call(
            "Embedding generation",
            self.client.embeddings.create,
            input=text,
            model=self.embedding_model,
            dimensions=self.embedding_dimensions
        )
        embedding = list(response.data[0].embedding)
        if len(embedding) != self.embedding_dimensions:
            raise UpstreamModelError(
                f"Embedding has {len(embedding)} dimensions, expected {self.embedding_dimensions}"
            )
        return embedding

    def generate_text(self, system: str, prompt: str) -> str:
        response = self._call(
            "Text generation",
            self.client.chat.completions.create,
            model=self.text_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        )
        try:
            content = response.choices[0].message.content
        except (IndexError, AttributeError) as e:
            raise UpstreamModelError(f"Malformed text generation response: {e}") from e
        return (content or "").strip()

    def stream_text(self, system: str, messages: List[Dict[str, str]]) -> Iterator[str]:
        """Stream reply chunks; errors raised mid-stream surface as UpstreamModelError."""
        stream = self._call(
            "Reply streaming",
            self.client.chat.completions.create,
            model=self.text_model,
            messages=[{"role": "system", "content": system}] + [
                {"role": m["role"], "content": m["content"]} for m in messages
            ],
            stream=True,
        )
        try:
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except openai.OpenAIError as e:
            logger.error(f"Reply streaming interrupted: {e}")
            raise UpstreamModelError(f"Reply streaming interrupted: {e}") from e

    def extract_structured_data(
        self,
        text: str,
        schema_spec: Dict,
        system_prompt: Optional[str] = None,
        user_message: Optional[str] = None
    ) -> Dict[str, Any]:
        """Extract structured data using JSON Schema mode.

        Args:
            text: Text to extract from
            schema_spec: Either a wrapped spec {'name', 'strict', 'schema'} or raw JSON schema
            system_prompt: Optional custom system prompt. If None, uses the job data prompt.
            user_message: Optional custom user message. If None, uses default.
        """
        name, strict, raw_schema = _unwrap_schema_spec(schema_spec)
        runtime_schema = copy.deepcopy(raw_schema)

        if runtime_schema.get("type") != "object" or "properties" not in runtime_schema:
            raise ValueError(f"Not a valid JSON Schema object. Top-level keys: {list(runtime_schema.keys())}")

        if system_prompt is None:
            system_prompt = JOB_DATA_EXTRACTION_SYSTEM_PROMPT

        if user_message is None:
            user_message = f"Extract the data into the requested JSON format.\n\n{text}"

        response = self._call(
            "Structured extraction",
            self.client.chat.completions.create,
            model=self.text_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            temperature=self.extraction_temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": name,
                    "schema": runtime_schema,
                    "strict": strict,
                },
            },
        )

        try:
            content = response.choices[0].message.content
            data = json.loads(content)
        except (json.JSONDecodeError, IndexError, AttributeError, TypeError) as e:
            logger.error(f"Failed to parse structured data response: {e}")
            raise UpstreamModelError(f"Unparseable structured response: {e}") from e

        logger.debug(f"Structured extraction ({self.text_model}) returned keys: {list(data.keys())}")
        return data
