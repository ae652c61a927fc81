"""
Unit tests for the OpenAI service.

Tests verify:
- Schema unwrapping helper works correctly
- extract_structured_data sends proper JSON schema to LLM
- Embeddings, text and streamed replies are read from the SDK responses
- Provider failures surface as UpstreamModelError
- Transient errors are retried only when configured
"""
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock
import json

import openai

from core.exceptions import UpstreamModelError
from core.llm.openai_service import OpenAIService, _parse_reset_duration, _unwrap_schema_spec
from core.llm.schema_models import JOB_DATA_EXTRACTION_SCHEMA, SKILL_TAGS_SCHEMA


def _chat_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


def _connection_error():
    return openai.APIConnectionError(request=MagicMock())


class TestUnwrapSchemaSpec:
    """Tests for the schema unwrapping helper."""

    def test_wrapper_schema_returns_name_strict_and_inner_schema(self):
        """Wrapped schemas should return name, strict flag, and inner schema."""
        name, strict, raw_schema = _unwrap_schema_spec(JOB_DATA_EXTRACTION_SCHEMA)

        assert name == "job_data_extraction_schema"
        assert strict is True
        assert raw_schema.get("type") == "object"
        assert "time_window" in raw_schema["properties"]

    def test_raw_schema_passes_through_unchanged(self):
        """Raw JSON schemas should pass through with defaults."""
        raw = {"type": "object", "properties": {"foo": {"type": "string"}}}
        name, strict, result = _unwrap_schema_spec(raw)

        assert name == "extraction_response"
        assert strict is False
        assert result == raw

    def test_skill_tags_schema_unwrapping(self):
        name, strict, raw_schema = _unwrap_schema_spec(SKILL_TAGS_SCHEMA)

        assert name == "skill_tags_schema"
        assert "skills" in raw_schema["properties"]

    def test_wrapper_missing_strict_defaults_to_false(self):
        """Wrapper without strict key should default to False."""
        wrapped = {"name": "test", "schema": {"type": "object", "properties": {}}}
        name, strict, raw_schema = _unwrap_schema_spec(wrapped)

        assert name == "test"
        assert strict is False


class TestExtractStructuredData:
    """Tests for extract_structured_data method."""

    @pytest.fixture
    def service(self):
        """Create service with mocked client."""
        svc = OpenAIService(api_key="test")
        svc.client = MagicMock()
        svc.client.chat.completions.create.return_value = _chat_response(json.dumps({"description": "fix sink"}))
        return svc

    def test_extract_with_wrapper_schema_sends_unwrapped_json_schema(self, service):
        """Wrapped schema should result in proper JSON schema sent to LLM."""
        service.extract_structured_data("test text", JOB_DATA_EXTRACTION_SCHEMA)

        call_kwargs = service.client.chat.completions.create.call_args[1]
        json_schema = call_kwargs['response_format']['json_schema']

        assert json_schema['schema'].get("type") == "object"
        assert "name" not in json_schema['schema']
        assert json_schema['strict'] is True
        assert json_schema['name'] == "job_data_extraction_schema"

    def test_extract_returns_parsed_json(self, service):
        assert service.extract_structured_data("test text", JOB_DATA_EXTRACTION_SCHEMA) == {"description": "fix sink"}

    def test_extract_uses_custom_prompts(self, service):
        service.extract_structured_data(
            "test text", SKILL_TAGS_SCHEMA, system_prompt="SYSTEM", user_message="USER"
        )

        messages = service.client.chat.completions.create.call_args[1]['messages']
        assert messages == [{"role": "system", "content": "SYSTEM"}, {"role": "user", "content": "USER"}]

    def test_extract_uses_configured_temperature(self, service):
        service.extract_structured_data("test text", JOB_DATA_EXTRACTION_SCHEMA)
        assert service.client.chat.completions.create.call_args[1]['temperature'] == 0.0

    def test_extract_raises_on_invalid_schema(self, service):
        """Invalid schema should raise ValueError with helpful message."""
        with pytest.raises(ValueError, match="Not a valid JSON Schema object"):
            service.extract_structured_data("test text", {"not": "a valid json schema"})
        service.client.chat.completions.create.assert_not_called()

    def test_unparseable_response(self, service):
        service.client.chat.completions.create.return_value = _chat_response("not json")
        with pytest.raises(UpstreamModelError):
            service.extract_structured_data("test text", JOB_DATA_EXTRACTION_SCHEMA)


class TestEmbeddingsAndText:

    @pytest.fixture
    def service(self):
        svc = OpenAIService(api_key="test", model_config={'embedding_dimensions': 3})
        svc.client = MagicMock()
        return svc

    def test_generate_embedding_passes_dimensions(self, service):
        service.client.embeddings.create.return_value = SimpleNamespace(
            data=[SimpleNamespace(embedding=[0.1, 0.2, 0.3])]
        )

        assert service.generate_embedding("hello") == [0.1, 0.2, 0.3]
        call_kwargs = service.client.embeddings.create.call_args[1]
        assert call_kwargs['dimensions'] == 3
        assert call_kwargs['model'] == "text-embedding-3-small"

    def test_wrong_embedding_dimension_is_an_error(self, service):
        service.client.embeddings.create.return_value = SimpleNamespace(
            data=[SimpleNamespace(embedding=[0.1, 0.2])]
        )
        with pytest.raises(UpstreamModelError):
            service.generate_embedding("hello")

    def test_generate_text_strips_content(self, service):
        service.client.chat.completions.create.return_value = _chat_response("  A good match.  ")
        assert service.generate_text("system", "prompt") == "A good match."

    def test_stream_text_yields_deltas(self, service):
        service.client.chat.completions.create.return_value = iter([
            _chunk("Hel"), _chunk(None), SimpleNamespace(choices=[]), _chunk("lo"),
        ])

        chunks = list(service.stream_text("system", [{"role": "user", "content": "hi"}]))

        assert chunks == ["Hel", "lo"]
        call_kwargs = service.client.chat.completions.create.call_args[1]
        assert call_kwargs['stream'] is True
        assert call_kwargs['messages'][0] == {"role": "system", "content": "system"}

    def test_provider_error_is_wrapped(self, service):
        error = _connection_error()
        service.client.embeddings.create.side_effect = error

        with pytest.raises(UpstreamModelError) as exc_info:
            service.generate_embedding("hello")

        assert exc_info.value.__cause__ is error
        assert service.client.embeddings.create.call_count == 1


class TestRetry:

    def test_transient_error_is_retried_when_configured(self):
        svc = OpenAIService(api_key="test", max_attempts=2)
        svc.client = MagicMock()
        svc._retrying.sleep = lambda seconds: None
        svc.client.chat.completions.create.side_effect = [_connection_error(), _chat_response("ok")]

        assert svc.generate_text("system", "prompt") == "ok"
        assert svc.client.chat.completions.create.call_count == 2

    def test_gives_up_after_max_attempts(self):
        svc = OpenAIService(api_key="test", max_attempts=2)
        svc.client = MagicMock()
        svc._retrying.sleep = lambda seconds: None
        svc.client.chat.completions.create.side_effect = _connection_error()

        with pytest.raises(UpstreamModelError):
            svc.generate_text("system", "prompt")
        assert svc.client.chat.completions.create.call_count == 2

    @pytest.mark.parametrize("value,expected", [("1s", 1.0), ("500ms", 0.5), ("1m30s", 90.0), ("", 0.0)])
    def test_parse_reset_duration(self, value, expected):
        assert _parse_reset_duration(value) == pytest.approx(expected)
