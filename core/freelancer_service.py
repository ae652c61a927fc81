#!/usr/bin/env python3
"""
Freelancer Profile Service - create or update a freelancer's profile.

An upsert:
1. Validates the input
2. Enriches the profile: a headline (max 10 words) and, when the freelancer
   did not pick skills, 1-5 generated skill tags
3. Builds the composite text and re-embeds only when it changed
4. Writes everything in a single unit of work, keyed by the owning profile id

Provider calls happen before the write; a failure leaves the stored profile
as it was.

The onboarding helpers only generate suggestions for the profile form; they
store nothing.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional
import logging

from core.composite_text import build_freelancer_composite_text
from core.exceptions import FreelancerProfileNotFoundException, ValidationError
from core.llm.interfaces import LLMProvider
from core.llm.schema_models import (
    DESCRIPTION_QUESTIONS_SCHEMA,
    EXAMPLE_TASKS_SCHEMA,
    SKILL_TAGS_SCHEMA,
)
from core.llm.system_prompts import (
    DESCRIPTION_QUESTIONS_SYSTEM_PROMPT,
    DESCRIPTION_WRITER_SYSTEM_PROMPT,
    EXAMPLE_TASKS_SYSTEM_PROMPT,
    FREELANCER_ANALYSIS_SYSTEM_PROMPT,
)
from core.utils import ContentFingerprinter, parse_uuid
from database.models import FreelancerProfile
from database.uow import marketplace_uow

logger = logging.getLogger(__name__)

PRICING_STYLES = ("hourly", "per_task")
MAX_HEADLINE_WORDS = 10
MAX_SKILL_TAGS = 5
EXAMPLE_TASK_COUNT = 3
MAX_EXAMPLE_TASK_WORDS = 5
MAX_DESCRIPTION_QUESTIONS = 4


@dataclass
class UpsertFreelancerProfileParams:
    profile_id: Any
    description: str
    availability: Optional[Dict[str, Any]] = None
    location: Optional[Dict[str, Any]] = None
    example_tasks: Optional[List[str]] = None
    pricing_style: Optional[str] = None
    hourly_rate: Optional[float] = None
    is_active: Optional[bool] = None
    short_notice: Optional[bool] = None
    skills: Optional[List[str]] = None  # Chosen by the freelancer; generated when empty


@dataclass
class FreelancerProfileDTO:
    """Freelancer profile data detached from the session."""
    id: Any
    profile_id: Any
    description: str
    headline: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    example_tasks: List[str] = field(default_factory=list)
    availability: Dict[str, Any] = field(default_factory=dict)
    location: Dict[str, Any] = field(default_factory=dict)
    pricing_style: Optional[str] = None
    hourly_rate: Optional[Decimal] = None
    is_active: bool = True
    has_embedding: bool = False

    @classmethod
    def from_orm(cls, profile: FreelancerProfile) -> "FreelancerProfileDTO":
        return cls(
            id=profile.id,
            profile_id=profile.profile_id,
            description=profile.description,
            headline=profile.headline,
            skills=list(profile.skills or []),
            example_tasks=list(profile.example_tasks or []),
            availability=dict(profile.availability or {}),
            location=dict(profile.location or {}),
            pricing_style=profile.pricing_style,
            hourly_rate=profile.hourly_rate,
            is_active=bool(profile.is_active),
            has_embedding=profile.embedding is not None,
        )


@dataclass
class _StoredProfile:
    description: str
    headline: Optional[str]
    skills: List[str]
    example_tasks: List[str]
    availability: Dict[str, Any]
    location: Dict[str, Any]
    pricing_style: Optional[str]
    hourly_rate: Optional[Decimal]
    content_hash: Optional[str]
    has_embedding: bool


def _clean_strings(values: Optional[List[Any]], name: str) -> List[str]:
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{name} must be a list of strings")
    cleaned = []
    for value in values:
        text = str(value).strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


def _mapping_param(value: Optional[Mapping[str, Any]], name: str) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValidationError(f"{name} must be an object")
    return dict(value)


def trim_headline(text: str) -> str:
    """First ten words of the generated headline, without wrapping quotes."""
    words = text.strip().strip('"\'').split()
    return " ".join(words[:MAX_HEADLINE_WORDS])


def trim_example_task(text: str) -> str:
    return " ".join(text.split()[:MAX_EXAMPLE_TASK_WORDS])


def _require_skills(skills: Optional[List[str]]) -> List[str]:
    cleaned = _clean_strings(skills, "skills")
    if not cleaned:
        raise ValidationError("At least one skill is required")
    return cleaned


class FreelancerProfileService:

    def __init__(self, ai_service: LLMProvider, uow_factory: Callable = marketplace_uow):
        self.ai = ai_service
        self.uow_factory = uow_factory

    def generate_headline(self, description: str) -> str:
        text = self.ai.generate_text(
            FREELANCER_ANALYSIS_SYSTEM_PROMPT,
            f"Generate a short, punchy headline (max 10 words) for this freelancer profile:\n\n{description}"
        )
        return trim_headline(text)

    def generate_skill_tags(self, description: str) -> List[str]:
        data = self.ai.extract_structured_data(
            description,
            SKILL_TAGS_SCHEMA,
            system_prompt=FREELANCER_ANALYSIS_SYSTEM_PROMPT,
            user_message=(
                "Extract 1-5 concise skill tags (as an array of short strings) "
                f"for this freelancer profile:\n\n{description}"
            )
        )
        return _clean_strings(data.get("skills"), "skills")[:MAX_SKILL_TAGS]

    def generate_example_tasks(self, skills: List[str], description: Optional[str] = None) -> List[str]:
        """
        Three short tasks the freelancer could help with, used to prefill example_tasks.

        Tasks are cut to five words each.
        """
        skill_list = ", ".join(_require_skills(skills))
        context = (description or "").strip()
        prompt = f"A freelancer has these skills: {skill_list}"
        if context:
            prompt += f"\n\nFreelancer description: {context}"

        data = self.ai.extract_structured_data(
            skill_list,
            EXAMPLE_TASKS_SCHEMA,
            system_prompt=EXAMPLE_TASKS_SYSTEM_PROMPT,
            user_message=(
                f"{prompt}\n\nGenerate exactly 3 specific, varied example tasks. "
                "Each task must be 5 words or fewer."
            )
        )
        tasks = [trim_example_task(t) for t in _clean_strings(data.get("tasks"), "tasks")]
        return [t for t in tasks if t][:EXAMPLE_TASK_COUNT]

    def generate_description_questions(self, skills: List[str]) -> List[str]:
        skill_list = ", ".join(_require_skills(skills))
        data = self.ai.extract_structured_data(
            skill_list,
            DESCRIPTION_QUESTIONS_SCHEMA,
            system_prompt=DESCRIPTION_QUESTIONS_SYSTEM_PROMPT,
            user_message=(
                f"A freelancer has selected these skills: {skill_list}.\n\n"
                "Generate 2-4 targeted questions that help write a compelling profile description."
            )
        )
        return _clean_strings(data.get("questions"), "questions")[:MAX_DESCRIPTION_QUESTIONS]

    def generate_description(self, skills: List[str], answers: Mapping[str, Any]) -> str:
        """
        Write a 2-4 sentence profile description from the skills and the
        freelancer's answers to the generated questions.

        Raises:
            ValidationError: No skills, or answers is not a question -> answer mapping
        """
        skill_list = ", ".join(_require_skills(skills))
        if not isinstance(answers, Mapping):
            raise ValidationError("answers must be an object of question -> answer")

        answers_text = "\n\n".join(f"Q: {q}\nA: {a}" for q, a in answers.items())
        text = self.ai.generate_text(
            DESCRIPTION_WRITER_SYSTEM_PROMPT,
            f"Create a freelancer profile description based on:\n\nSkills: {skill_list}\n\n"
            f"Answers to questions:\n{answers_text}\n\n"
            "Write 2-4 sentences that show what this freelancer can do for clients."
        )
        return text.strip()

    def _load_stored(self, profile_uuid: Any) -> Optional[_StoredProfile]:
        with self.uow_factory() as repo:
            profile = repo.freelancers.get_by_profile_id(profile_uuid)
            if profile is None:
                return None
            return _StoredProfile(
                description=profile.description,
                headline=profile.headline,
                skills=list(profile.skills or []),
                example_tasks=list(profile.example_tasks or []),
                availability=dict(profile.availability or {}),
                location=dict(profile.location or {}),
                pricing_style=profile.pricing_style,
                hourly_rate=profile.hourly_rate,
                content_hash=profile.content_hash,
                has_embedding=profile.embedding is not None,
            )

    def upsert_profile(self, params: UpsertFreelancerProfileParams) -> FreelancerProfileDTO:
        """
        Create or update the profile owned by params.profile_id.

        Fields left as None keep their stored value.

        Raises:
            ValidationError: Invalid profile id, blank description or bad pricing
            UpstreamModelError: Enrichment or embedding failed; nothing was written
        """
        profile_uuid = parse_uuid(params.profile_id)
        if profile_uuid is None:
            raise ValidationError(f"Invalid profile id: {params.profile_id}")

        description = (params.description or "").strip()
        if not description:
            raise ValidationError("Description is required")

        if params.pricing_style is not None and params.pricing_style not in PRICING_STYLES:
            raise ValidationError(f"pricing_style must be one of {PRICING_STYLES}")
        if params.hourly_rate is not None and params.hourly_rate < 0:
            raise ValidationError("hourly_rate cannot be negative")

        availability = _mapping_param(params.availability, "availability")
        location = _mapping_param(params.location, "location")
        provided_skills = _clean_strings(params.skills, "skills")

        stored = self._load_stored(profile_uuid)
        description_changed = stored is None or stored.description != description

        fields: Dict[str, Any] = {"description": description}

        # Enrichment
        if description_changed or not (stored and stored.headline):
            fields["headline"] = self.generate_headline(description)
        if provided_skills:
            fields["skills"] = provided_skills
        elif description_changed or not (stored and stored.skills):
            fields["skills"] = self.generate_skill_tags(description)

        if availability is not None or params.short_notice is not None:
            merged_availability = dict(availability if availability is not None else (stored.availability if stored else {}))
            if params.short_notice is not None:
                merged_availability["short_notice"] = params.short_notice
            fields["availability"] = merged_availability
        if location is not None:
            fields["location"] = location
        if params.example_tasks is not None:
            fields["example_tasks"] = _clean_strings(params.example_tasks, "example_tasks")
        if params.pricing_style is not None:
            fields["pricing_style"] = params.pricing_style
        if params.hourly_rate is not None:
            fields["hourly_rate"] = Decimal(str(params.hourly_rate))
        if params.is_active is not None:
            fields["is_active"] = params.is_active

        # Embedding from the profile as it will be stored
        view = dict(vars(stored)) if stored else {}
        view.update(fields)
        composite_text = build_freelancer_composite_text(view)
        content_hash = ContentFingerprinter.calculate(composite_text)

        embedding = None
        if stored is None or not stored.has_embedding or stored.content_hash != content_hash:
            embedding = self.ai.generate_embedding(composite_text)
        else:
            logger.debug(f"Composite text unchanged for profile {profile_uuid}, keeping embedding")

        with self.uow_factory() as repo:
            profile = repo.freelancers.upsert_profile(profile_uuid, fields)
            if embedding is not None:
                repo.freelancers.save_embedding(profile, embedding, content_hash)
            repo.freelancers.flush()
            result = FreelancerProfileDTO.from_orm(profile)

        logger.info(
            f"Upserted freelancer profile {profile_uuid} "
            f"({'re-embedded' if embedding is not None else 'embedding unchanged'})"
        )
        return result

    def get_profile(self, profile_id: Any) -> FreelancerProfileDTO:
        profile_uuid = parse_uuid(profile_id)
        if profile_uuid is None:
            raise FreelancerProfileNotFoundException(f"Freelancer profile {profile_id} not found")

        with self.uow_factory() as repo:
            profile = repo.freelancers.get_by_profile_id(profile_uuid)
            if profile is None:
                raise FreelancerProfileNotFoundException(f"Freelancer profile {profile_id} not found")
            return FreelancerProfileDTO.from_orm(profile)
