"""Unit tests for models, exceptions and request helpers."""

import pytest
from pydantic import ValidationError

from mem0_cloud import (
    AllUsers,
    APIError,
    APIVersion,
    AuthenticationError,
    Mem0Error,
    Memory,
    MemoryClient,
    MemoryHistory,
    MemoryOptions,
    Message,
    RateLimitError,
    SearchOptions,
    ServerError,
    WebhookPayload,
)
from mem0_cloud.base import parse_memories, prepare_messages, prepare_params
from mem0_cloud.exceptions import api_error_for_status


def test_prepare_params() -> None:
    params = prepare_params(
        {
            "user_id": "alice",
            "agent_id": None,
            "infer": False,
            "page": 3,
            "metadata": {"topic": "food"},
            "version": APIVersion.V2,
        }
    )

    assert params == {
        "user_id": "alice",
        "infer": "false",
        "page": "3",
        "metadata": '{"topic": "food"}',
        "version": "v2",
    }


def test_options_drop_none_and_keep_unknown_keys() -> None:
    options = SearchOptions(user_id="alice", limit=None, custom_flag="x", api_version=APIVersion.V2)

    assert options.model_dump(exclude_none=True, mode="json") == {
        "user_id": "alice",
        "custom_flag": "x",
        "api_version": "v2",
    }


def test_options_accept_numeric_ids() -> None:
    options = MemoryOptions(user_id=42, agent_id=7, org_id=3, page=2)

    assert options.model_dump(exclude_none=True, mode="json") == {
        "user_id": "42",
        "agent_id": "7",
        "org_id": 3,
        "page": 2,
    }


def test_response_models_accept_sparse_records() -> None:
    users = AllUsers.model_validate({"results": [{"id": 7, "name": "alice", "total_memories": 5}]})
    history = MemoryHistory.model_validate({"id": 1, "categories": None, "input": None})
    memory = Memory.model_validate({"id": 99, "user_id": 42})

    assert users.results[0].id == "7"
    assert users.results[0].type is None
    assert history.id == "1"
    assert history.memory_id is None
    assert history.categories is None
    assert memory.id == "99"
    assert memory.user_id == "42"


def test_prepare_messages_accepts_models_dicts_and_strings() -> None:
    assert prepare_messages("hello") == [{"role": "user", "content": "hello"}]
    assert prepare_messages([Message(role="assistant", content="hi"), {"role": "user", "content": "yo"}]) == [
        {"role": "assistant", "content": "hi"},
        {"role": "user", "content": "yo"},
    ]


def test_prepare_messages_rejects_unknown_role() -> None:
    with pytest.raises(ValidationError):
        prepare_messages([{"role": "system", "content": "be nice"}])


@pytest.mark.parametrize(
    ("data", "ids"),
    [
        ([{"id": "a"}, {"id": "b"}], ["a", "b"]),
        ({"results": [{"id": "a"}]}, ["a"]),
        ({"id": "a", "memory": "x"}, ["a"]),
        ({"message": "queued", "status": "PENDING"}, []),
        ([], []),
    ],
)
def test_parse_memories(data, ids) -> None:
    assert [m.id for m in parse_memories(data)] == ids


def test_memory_keeps_unknown_fields() -> None:
    memory = parse_memories([{"id": "a", "expiration_date": "2027-01-01"}])[0]

    assert memory.model_extra == {"expiration_date": "2027-01-01"}


def test_webhook_payload_aliases() -> None:
    payload = WebhookPayload(webhookId="wh_1", eventTypes=["memory_add"])

    assert payload.webhook_id == "wh_1"
    assert payload.model_dump(by_alias=True, exclude_none=True) == {
        "webhookId": "wh_1",
        "eventTypes": ["memory_add"],
    }


@pytest.mark.parametrize(
    ("status", "error_type"),
    [(401, AuthenticationError), (429, RateLimitError), (500, ServerError), (502, ServerError), (409, APIError)],
)
def test_api_error_for_status(status: int, error_type: type) -> None:
    error = api_error_for_status(status, "detail text")

    assert type(error) is error_type
    assert isinstance(error, Mem0Error)
    assert error.status == status
    assert error.status_code == status
    assert str(error) == f"API request failed with status {status}: detail text"


def test_scope_merging() -> None:
    client = MemoryClient(
        api_key="key",
        organization_id="org_1",
        project_id="proj_1",
        organization_name="Acme",
        project_name="Assistant",
    )

    scoped = client._scoped({"user_id": "alice", "project_name": "Other"})

    assert scoped == {"user_id": "alice", "org_id": "org_1", "project_id": "proj_1"}


def test_scope_merging_without_scope() -> None:
    client = MemoryClient(api_key="key")

    assert client._scoped({"user_id": "alice"}) == {"user_id": "alice"}
