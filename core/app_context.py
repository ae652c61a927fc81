from dataclasses import dataclass

from core.config_loader import AppConfig, LlmConfig
from core.embedding_service import EmbeddingService
from core.freelancer_service import FreelancerProfileService
from core.intake.service import IntakeService
from core.job_service import JobRequestService
from core.llm.openai_service import OpenAIService
from core.matcher.service import MatchingService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Every service gets its provider and configuration through its
    constructor. DB access is obtained via marketplace_uow() inside each
    operation, so no session is attached here.
    """
    config: AppConfig
    ai_service: OpenAIService
    embedding_service: EmbeddingService
    job_service: JobRequestService
    freelancer_service: FreelancerProfileService
    matching_service: MatchingService
    intake_service: IntakeService

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance
        """
        ai_service = cls._build_ai_service(config.llm)
        embedding_service = EmbeddingService(ai_service)

        return cls(
            config=config,
            ai_service=ai_service,
            embedding_service=embedding_service,
            job_service=JobRequestService(embedding_service),
            freelancer_service=FreelancerProfileService(ai_service),
            matching_service=MatchingService(ai_service, config.matching),
            intake_service=IntakeService(ai_service, config.intake),
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'text_model': llm_config.text_model,
            'embedding_model': llm_config.embedding_model,
            'embedding_dimensions': llm_config.embedding_dimensions,
            'extraction_temperature': llm_config.extraction_temperature,
        }

        return OpenAIService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model_config=model_config,
            timeout=llm_config.request_timeout_seconds,
            max_attempts=llm_config.max_attempts
        )
