"""Pydantic models for the Mem0 cloud SDK."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .types import APIVersion, Feedback, OutputFormat

# Messages


class ImageURL(BaseModel):
    """Location of an image sent as message content."""

    url: str


class MultiModalContent(BaseModel):
    """Image content for a conversation turn."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


class Message(BaseModel):
    """A single conversation turn sent to add()."""

    role: Literal["user", "assistant"]
    content: str | MultiModalContent


# Server resources


class MemoryData(BaseModel):
    """Data container some endpoints use for the memory text."""

    model_config = ConfigDict(extra="allow")

    memory: str


class Memory(BaseModel):
    """A memory record. Only the id is guaranteed; search results carry a score."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    messages: list[dict[str, Any]] | None = None
    event: str | None = None
    data: MemoryData | None = None
    memory: str | None = None
    user_id: str | None = None
    agent_id: str | None = None
    app_id: str | None = None
    run_id: str | None = None
    hash: str | None = None
    categories: list[str] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    memory_type: str | None = None
    score: float | None = None
    metadata: dict[str, Any] | None = None
    owner: str | None = None


class MemoryHistory(BaseModel):
    """An audit entry for one change to a memory."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    memory_id: str | None = None
    input: list[dict[str, Any]] | None = None
    old_memory: str | None = None
    new_memory: str | None = None
    user_id: str | None = None
    categories: list[str] | None = None
    event: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class User(BaseModel):
    """An entity (user, agent, app or run) that owns memories."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str | None = None
    name: str
    type: str | None = None
    total_memories: int = 0
    owner: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AllUsers(BaseModel):
    """Paginated list of entities."""

    count: int = 0
    results: list[User] = Field(default_factory=list)
    next: str | None = None
    previous: str | None = None


class Webhook(BaseModel):
    """A webhook registered on a project."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    webhook_id: str | None = None
    name: str | None = None
    url: str | None = None
    project: str | None = None
    is_active: bool | None = None
    event_types: list[str] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectResponse(BaseModel):
    """Project settings; keys beyond the two below are kept as extras."""

    model_config = ConfigDict(extra="allow")

    custom_instructions: str | None = None
    custom_categories: list[Any] | None = None


class MessageResponse(BaseModel):
    """Confirmation returned by delete/update style endpoints."""

    model_config = ConfigDict(extra="allow")

    message: str | None = None


class ExportResponse(BaseModel):
    """Handle of a memory export job."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    message: str | None = None
    id: str | None = None


# Option bags


class MemoryOptions(BaseModel):
    """Options for add, get_all and delete_all.

    Every field is optional and unknown keys are passed through to the API.
    Fields left as None are never sent.
    """

    model_config = ConfigDict(extra="allow", use_enum_values=True, coerce_numbers_to_str=True)

    api_version: APIVersion | str | None = None
    version: APIVersion | str | None = None
    user_id: str | None = None
    agent_id: str | None = None
    app_id: str | None = None
    run_id: str | None = None
    metadata: dict[str, Any] | None = None
    filters: dict[str, Any] | None = None
    org_name: str | None = None
    project_name: str | None = None
    org_id: str | int | None = None
    project_id: str | int | None = None
    infer: bool | None = None
    page: int | None = None
    page_size: int | None = None
    includes: str | None = None
    excludes: str | None = None
    enable_graph: bool | None = None
    start_date: str | None = None
    end_date: str | None = None
    custom_categories: list[dict[str, Any]] | None = None
    custom_instructions: str | None = None
    timestamp: int | None = None
    output_format: OutputFormat | str | None = None
    async_mode: bool | None = None
    filter_memories: bool | None = None
    immutable: bool | None = None
    structured_data_schema: dict[str, Any] | None = None


class SearchOptions(MemoryOptions):
    """Options for search and get_all."""

    limit: int | None = None
    threshold: float | None = None
    top_k: int | None = None
    only_metadata_based_search: bool | None = None
    keyword_search: bool | None = None
    fields: list[str] | None = None
    categories: list[str] | None = None
    rerank: bool | None = None


class ProjectOptions(BaseModel):
    """Options for get_project."""

    fields: list[str] | None = None


# Request payloads


class MemoryUpdateBody(BaseModel):
    """One entry of a batch update."""

    model_config = ConfigDict(populate_by_name=True)

    memory_id: str = Field(alias="memoryId")
    text: str


class WebhookPayload(BaseModel):
    """Webhook create/update body. Serialized with the API's camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    webhook_id: str | None = Field(default=None, alias="webhookId")
    name: str | None = None
    url: str | None = None
    event_types: list[str] | None = Field(default=None, alias="eventTypes")
    project_id: str | None = Field(default=None, alias="projectId")


class FeedbackPayload(BaseModel):
    """Feedback on a memory; a null feedback clears earlier feedback."""

    model_config = ConfigDict(use_enum_values=True)

    memory_id: str
    feedback: Feedback | None = None
    feedback_reason: str | None = None


class CreateMemoryExportPayload(BaseModel):
    """Body for creating an export job."""

    model_config = ConfigDict(populate_by_name=True)

    export_schema: dict[str, Any] = Field(alias="schema")
    filters: dict[str, Any]
    export_instructions: str | None = None
    org_id: str | None = None
    project_id: str | None = None


class GetMemoryExportPayload(BaseModel):
    """Body for looking up an export job by id or filters."""

    memory_export_id: str | None = None
    filters: dict[str, Any] | None = None
    org_id: str = ""
    project_id: str = ""
