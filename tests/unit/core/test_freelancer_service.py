"""
Unit tests for FreelancerProfileService.
"""
import uuid
from decimal import Decimal

import pytest

from core.exceptions import FreelancerProfileNotFoundException, UpstreamModelError, ValidationError
from core.freelancer_service import (
    FreelancerProfileService,
    UpsertFreelancerProfileParams,
    trim_example_task,
    trim_headline,
)
from tests.mocks.llm_mocks import InMemoryMarketplace, MockLLMProvider


@pytest.fixture
def market():
    return InMemoryMarketplace()


@pytest.fixture
def ai():
    return MockLLMProvider(
        text_response='"Reliable Almere handyman for quick household fixes"',
        structured_response={"skills": [" plumbing ", "carpentry", "plumbing"]},
    )


@pytest.fixture
def service(ai, market):
    return FreelancerProfileService(ai, uow_factory=market.uow_factory())


@pytest.fixture
def params():
    return UpsertFreelancerProfileParams(
        profile_id=uuid.uuid4(),
        description="Handyman with 10 years of experience",
        availability={"days": {"saturday": ["morning"]}},
        location={"postcode": "1312AB", "travel_radius": "nearby"},
        pricing_style="hourly",
        hourly_rate=35,
    )


class TestUpsertProfile:

    def test_new_profile_is_enriched_and_embedded(self, service, ai, params):
        dto = service.upsert_profile(params)

        assert dto.headline == "Reliable Almere handyman for quick household fixes"
        assert dto.skills == ["plumbing", "carpentry"]
        assert dto.hourly_rate == Decimal("35")
        assert dto.has_embedding is True
        assert ai.call_names() == ["generate_text", "extract_structured_data", "generate_embedding"]

    def test_embedding_includes_generated_skills(self, service, ai, params):
        service.upsert_profile(params)
        embedded_text = ai.calls[-1][1]
        assert embedded_text == (
            "Handyman with 10 years of experience. Skills: plumbing, carpentry. "
            "Available: Saturday morning. Location: postcode 1312AB, travels within 2 km. "
            "Pricing: €35 per hour"
        )

    def test_provided_skills_skip_generation(self, service, ai, params):
        params.skills = ["tiling"]
        dto = service.upsert_profile(params)

        assert dto.skills == ["tiling"]
        assert "extract_structured_data" not in ai.call_names()

    def test_unchanged_profile_is_not_re_embedded(self, service, ai, params):
        service.upsert_profile(params)
        ai.calls.clear()

        service.upsert_profile(params)

        assert ai.calls == []

    def test_changed_composite_text_is_re_embedded(self, service, ai, params):
        service.upsert_profile(params)
        ai.calls.clear()

        params.hourly_rate = 40
        service.upsert_profile(params)

        assert ai.call_names() == ["generate_embedding"]
        assert "€40 per hour" in ai.calls[0][1]

    def test_description_change_regenerates_headline(self, service, ai, params):
        service.upsert_profile(params)
        ai.calls.clear()

        params.description = "Gardener and handyman"
        service.upsert_profile(params)

        assert ai.call_names() == ["generate_text", "extract_structured_data", "generate_embedding"]

    def test_short_notice_is_stored_in_availability(self, service, params):
        params.short_notice = True
        dto = service.upsert_profile(params)
        assert dto.availability == {"days": {"saturday": ["morning"]}, "short_notice": True}

    def test_upsert_is_keyed_by_profile_id(self, service, market, params):
        first = service.upsert_profile(params)
        params.description = "Updated description"
        second = service.upsert_profile(params)

        assert first.id == second.id
        assert len(market.freelancers.rows) == 1

    def test_blank_description_is_rejected(self, service, ai, params):
        params.description = "  "
        with pytest.raises(ValidationError):
            service.upsert_profile(params)
        assert ai.calls == []

    def test_invalid_pricing_style(self, service, params):
        params.pricing_style = "barter"
        with pytest.raises(ValidationError):
            service.upsert_profile(params)

    def test_negative_rate(self, service, params):
        params.hourly_rate = -1
        with pytest.raises(ValidationError):
            service.upsert_profile(params)

    def test_provider_failure_writes_nothing(self, service, ai, market, params):
        ai.fail_with = UpstreamModelError("down")
        with pytest.raises(UpstreamModelError):
            service.upsert_profile(params)
        assert market.freelancers.rows == {}


class TestGetProfile:

    def test_unknown_profile(self, service):
        with pytest.raises(FreelancerProfileNotFoundException):
            service.get_profile(uuid.uuid4())

    def test_get_after_upsert(self, service, params):
        service.upsert_profile(params)
        assert service.get_profile(params.profile_id).description == params.description


class TestTrimHeadline:

    def test_strips_quotes(self):
        assert trim_headline('"Friendly handyman"') == "Friendly handyman"

    def test_limits_to_ten_words(self):
        assert trim_headline(" ".join(["word"] * 14)) == " ".join(["word"] * 10)


class TestExampleTasks:

    def test_tasks_are_capped_and_trimmed(self, market):
        ai = MockLLMProvider(structured_response={"tasks": [
            "Mount TV on wall",
            "Assemble a large IKEA wardrobe for the bedroom",
            " Fix leaking kitchen tap ",
            "Hang curtains",
        ]})
        service = FreelancerProfileService(ai, uow_factory=market.uow_factory())

        tasks = service.generate_example_tasks(["handyman", "carpentry"], "Ten years of experience")

        assert tasks == ["Mount TV on wall", "Assemble a large IKEA wardrobe", "Fix leaking kitchen tap"]
        assert ai.calls == [("extract_structured_data", "handyman, carpentry", "example_tasks_schema")]
        assert market.units_of_work == 0

    def test_skills_are_required(self, service, ai):
        with pytest.raises(ValidationError):
            service.generate_example_tasks([])
        with pytest.raises(ValidationError):
            service.generate_example_tasks(["  "])
        assert ai.calls == []

    def test_trim_example_task(self):
        assert trim_example_task("  one two three four five six ") == "one two three four five"


class TestDescriptionHelpers:

    def test_questions_capped_at_four(self, market):
        ai = MockLLMProvider(structured_response={"questions": ["Q1?", "Q2?", "Q2?", "Q3?", "Q4?", "Q5?"]})
        service = FreelancerProfileService(ai, uow_factory=market.uow_factory())

        assert service.generate_description_questions(["gardening"]) == ["Q1?", "Q2?", "Q3?", "Q4?"]
        assert ai.call_names() == ["extract_structured_data"]

    def test_questions_need_skills(self, service):
        with pytest.raises(ValidationError):
            service.generate_description_questions(None)

    def test_description_from_answers(self, market):
        ai = MockLLMProvider(text_response="  I fix small things around the house.  ")
        service = FreelancerProfileService(ai, uow_factory=market.uow_factory())

        text = service.generate_description(
            ["plumbing"], {"What jobs do you prefer?": "Small repairs"}
        )

        assert text == "I fix small things around the house."
        _, _, prompt = ai.calls[0]
        assert "Skills: plumbing" in prompt
        assert "Q: What jobs do you prefer?\nA: Small repairs" in prompt
        assert market.units_of_work == 0

    def test_answers_must_be_a_mapping(self, service, ai):
        with pytest.raises(ValidationError):
            service.generate_description(["plumbing"], ["Small repairs"])
        assert ai.calls == []
