"""
LLM Provider Interface - Abstract base for embedding and generation providers.

The matching and intake services only talk to this interface, so tests can
substitute a deterministic provider and deployments can swap vendors.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Any, Iterator, Optional


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers (OpenAI, Ollama, etc.).

    Every method may raise UpstreamModelError; callers decide whether to retry.
    """

    @abstractmethod
    def generate_embedding(self, text: str) -> List[float]:
        """
        Generate a fixed-dimension vector embedding for the given text.
        """
        pass

    @abstractmethod
    def generate_text(self, system: str, prompt: str) -> str:
        """
        Generate a single completion for prompt under the system instructions.
        """
        pass

    @abstractmethod
    def stream_text(self, system: str, messages: List[Dict[str, str]]) -> Iterator[str]:
        """
        Stream an assistant reply for a chat history as text chunks.

        Args:
            system: Instruction set for the reply
            messages: [{'role': 'user'|'assistant', 'content': str}, ...]
        """
        pass

    @abstractmethod
    def extract_structured_data(
        self,
        text: str,
        schema_spec: Dict,
        system_prompt: Optional[str] = None,
        user_message: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Extract structured JSON data from text adhering to a schema.

        Args:
            text: Text to extract from
            schema_spec: Either a wrapped spec {'name', 'strict', 'schema'} or raw JSON schema
            system_prompt: Optional custom system prompt
            user_message: Optional custom user message
        """
        pass
