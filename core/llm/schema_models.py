"""
Pydantic models for the JSON schemas sent to the generation provider.

Every extraction field is required but nullable: OpenAI strict structured
output needs all keys present, and null is how the model says "not
mentioned in this conversation".
"""
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class LocationExtraction(BaseModel):
    model_config = ConfigDict(extra='forbid')

    city: Optional[str] = Field(description="City of the job, always Almere when mentioned")
    postcode: Optional[str] = Field(description="Postcode, e.g. 1312AB")
    address: Optional[str] = Field(description="Street address")


class TimeWindowExtraction(BaseModel):
    model_config = ConfigDict(extra='forbid')

    date: Optional[str] = Field(description="Date of the job, ISO format (YYYY-MM-DD) when possible")
    time: Optional[str] = Field(description="Preferred time as stated")
    time_of_day: Optional[str] = Field(description="morning, afternoon or evening")
    notes: Optional[str] = Field(description="Other timing notes")


class JobDataExtraction(BaseModel):
    """Job data mentioned in an intake conversation."""
    model_config = ConfigDict(extra='forbid')

    description: Optional[str] = Field(description="Main task description")
    details: Optional[str] = Field(description="Additional details about the task")
    location: Optional[LocationExtraction] = Field(description="Where the job takes place")
    time_window: Optional[TimeWindowExtraction] = Field(description="When the job should happen")
    budget: Optional[str] = Field(description="Budget mentioned by the user")
    estimated_duration: Optional[str] = Field(description="Estimated duration, e.g. '2 hours'")


class SkillTags(BaseModel):
    model_config = ConfigDict(extra='forbid')

    skills: List[str] = Field(description="1-5 concise skill tags")


class ExampleTasks(BaseModel):
    model_config = ConfigDict(extra='forbid')

    tasks: List[str] = Field(description="Exactly 3 concrete tasks, at most 5 words each")


class DescriptionQuestions(BaseModel):
    model_config = ConfigDict(extra='forbid')

    questions: List[str] = Field(description="2-4 short questions about the freelancer's work")


# Generate OpenAI-compatible schemas
JOB_DATA_EXTRACTION_SCHEMA = {
    "name": "job_data_extraction_schema",
    "strict": True,
    "schema": JobDataExtraction.model_json_schema()
}

SKILL_TAGS_SCHEMA = {
    "name": "skill_tags_schema",
    "strict": True,
    "schema": SkillTags.model_json_schema()
}

EXAMPLE_TASKS_SCHEMA = {
    "name": "example_tasks_schema",
    "strict": True,
    "schema": ExampleTasks.model_json_schema()
}

DESCRIPTION_QUESTIONS_SCHEMA = {
    "name": "description_questions_schema",
    "strict": True,
    "schema": DescriptionQuestions.model_json_schema()
}
