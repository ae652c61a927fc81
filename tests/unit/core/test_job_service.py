"""
Unit tests for JobRequestService.
"""
import uuid

import pytest

from core.embedding_service import EmbeddingService
from core.exceptions import JobNotFoundException, UpstreamModelError, ValidationError
from core.job_service import CreateJobRequestParams, JobRequestService
from tests.mocks.llm_mocks import InMemoryMarketplace, MockLLMProvider


@pytest.fixture
def market():
    return InMemoryMarketplace()


@pytest.fixture
def ai():
    return MockLLMProvider()


@pytest.fixture
def service(ai, market):
    uow = market.uow_factory()
    return JobRequestService(EmbeddingService(ai, uow_factory=uow), uow_factory=uow)


class TestCreateJobRequest:

    def test_creates_and_embeds(self, service, ai, market):
        client_id = uuid.uuid4()
        dto = service.create_job_request(CreateJobRequestParams(
            client_profile_id=client_id,
            description="  Fix a leaking sink ",
            location={"city": "Almere", "postcode": "1312AB", "address": None},
            time_window={"date": "2024-06-01", "time_of_day": "morning"},
            budget=" 50 euro ",
        ))

        assert dto.description == "Fix a leaking sink"
        assert dto.client_profile_id == client_id
        assert dto.location == {"city": "Almere", "postcode": "1312AB"}
        assert dto.budget == "50 euro"
        assert dto.has_embedding is True
        assert ai.calls == [(
            "generate_embedding",
            "Fix a leaking sink. When: date: 2024-06-01, time: morning. Location: postcode 1312AB. Budget: 50 euro",
        )]

    def test_insert_and_embedding_are_separate_units_of_work(self, service, market):
        service.create_job_request(CreateJobRequestParams(description="Fix sink"))
        # insert, read for embedding, write embedding, read back
        assert market.units_of_work == 4

    def test_blank_description_is_rejected_before_any_call(self, service, ai, market):
        with pytest.raises(ValidationError):
            service.create_job_request(CreateJobRequestParams(description="   "))
        assert ai.calls == []
        assert market.units_of_work == 0

    def test_blank_budget_becomes_none(self, service):
        dto = service.create_job_request(CreateJobRequestParams(description="Fix sink", budget="  "))
        assert dto.budget is None

    def test_location_must_be_an_object(self, service):
        with pytest.raises(ValidationError):
            service.create_job_request(CreateJobRequestParams(description="Fix sink", location="Almere"))

    def test_embedding_failure_leaves_job_without_embedding(self, service, ai, market):
        ai.fail_with = UpstreamModelError("down")

        with pytest.raises(UpstreamModelError):
            service.create_job_request(CreateJobRequestParams(description="Fix sink"))

        [job] = market.jobs.rows.values()
        assert job.embedding is None


class TestReadJobRequests:

    def test_get_unknown(self, service):
        with pytest.raises(JobNotFoundException):
            service.get_job_request(uuid.uuid4())

    def test_list_for_client(self, service):
        client_id = uuid.uuid4()
        service.create_job_request(CreateJobRequestParams(description="Fix sink", client_profile_id=client_id))
        service.create_job_request(CreateJobRequestParams(description="Other", client_profile_id=uuid.uuid4()))

        jobs = service.list_client_job_requests(client_id)

        assert [j.description for j in jobs] == ["Fix sink"]
