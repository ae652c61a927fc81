import yaml
import os
from typing import List, Optional
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    url: str


class LlmConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    text_model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    extraction_temperature: float = 0.0  # Temperature for extraction (0.0 = deterministic)
    request_timeout_seconds: float = 30.0
    # Attempts per provider call, including the first one. 1 = fail fast, caller decides.
    max_attempts: int = 1


class CompatibilityRulesConfig(BaseModel):
    """
    Rules for structural compatibility between a job and a freelancer.

    Postcode distance is measured on the 4-digit numeric part of Dutch
    postcodes (e.g. "1312AB" -> 1312).
    """
    nearby_max_distance: int = 2
    city_plus_max_distance: int = 10
    city_postcode_min: int = 1300
    city_postcode_max: int = 1399


class MatchingWeights(BaseModel):
    """
    Secondary adjustments added on top of raw cosine similarity.

    score = similarity + availability_boost * available + location_boost * in_range

    Similarity stays the dominant signal; the boosts only separate candidates
    whose structured data disagrees with the job.
    """
    availability_boost: float = 0.2
    location_boost: float = 0.1


class MatchingConfig(BaseModel):
    """
    Configuration for the MatchingService (ranking freelancers for a job).
    """
    top_k: int = 5
    candidate_pool_multiplier: int = 3  # Fetch top_k * multiplier before filtering
    min_similarity: float = 0.2  # Minimum cosine similarity to keep a candidate
    exclude_structural_mismatches: bool = True  # False = demote only
    service_area_postcode_prefixes: List[str] = Field(default_factory=list)
    weights: MatchingWeights = Field(default_factory=MatchingWeights)
    rules: CompatibilityRulesConfig = Field(default_factory=CompatibilityRulesConfig)

    # Explanations
    explanations_enabled: bool = True
    explain_top_n: Optional[int] = None  # None = explain every returned match


class IntakeConfig(BaseModel):
    """Configuration for the conversational job intake."""
    default_city: str = "Almere"


class AppConfig(BaseModel):
    database: DatabaseConfig
    llm: LlmConfig = Field(default_factory=LlmConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    intake: IntakeConfig = Field(default_factory=IntakeConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from another directory), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        if not data.get('database'):
            data['database'] = {}
        data['database']['url'] = env_db_url

    # Allow env var override for LLM Base URL
    env_llm_base_url = os.environ.get("LLM_BASE_URL")
    if env_llm_base_url:
        if not data.get('llm'):
            data['llm'] = {}
        data['llm']['base_url'] = env_llm_base_url

    env_api_key = os.environ.get("OPENAI_API_KEY")
    if env_api_key:
        if not data.get('llm'):
            data['llm'] = {}
        data['llm']['api_key'] = env_api_key

    return AppConfig(**data)
