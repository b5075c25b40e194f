"""Request construction shared by the async and sync Mem0 clients.

Both clients describe every remote call as a :class:`PreparedRequest` built
here, send it through their own transport, and hand the decoded JSON back to
the parsing helpers below. Local validation happens while the request is
built, so a rejected call never reaches the network.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

import httpx
from pydantic import TypeAdapter

from .exceptions import AuthenticationError, ServerError, api_error_for_status
from .models import (
    AllUsers,
    CreateMemoryExportPayload,
    FeedbackPayload,
    GetMemoryExportPayload,
    Memory,
    MemoryHistory,
    MemoryOptions,
    MemoryUpdateBody,
    Message,
    SearchOptions,
    WebhookPayload,
)
from .types import APIVersion, EntityType, Feedback

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://api.mem0.ai"
REQUEST_TIMEOUT = 60.0
API_KEY_ENV_VAR = "MEM0_API_KEY"
HOST_ENV_VAR = "MEM0_API_HOST"

ENTITY_DELETED = "Entity deleted successfully."
ALL_ENTITIES_DELETED = "All users, agents, apps and runs deleted."

MessagesInput = Union[str, Iterable[Union[Message, dict[str, Any]]]]
UpdateInput = Union[MemoryUpdateBody, dict[str, Any]]

_memory_list = TypeAdapter(list[Memory])
_history_list = TypeAdapter(list[MemoryHistory])


@dataclass(frozen=True)
class PreparedRequest:
    """A fully built API call: method, path relative to the host, query and body."""

    method: str
    path: str
    params: Optional[dict[str, Any]] = None
    body: Any = None


def _to_value(v: Any) -> Any:
    """Extract string value from an enum member, or return string as-is."""
    return v.value if hasattr(v, "value") else v


def prepare_params(options: dict[str, Any]) -> dict[str, str]:
    """Flatten options into query parameters, skipping None values."""
    params: dict[str, str] = {}
    for key, value in options.items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, (dict, list)):
            params[key] = json.dumps(value)
        else:
            params[key] = str(_to_value(value))
    return params


def prepare_messages(messages: MessagesInput) -> list[dict[str, Any]]:
    """Normalize messages into wire dicts. A bare string is one user turn."""
    if isinstance(messages, str):
        messages = [{"role": "user", "content": messages}]
    prepared = []
    for message in messages:
        if not isinstance(message, Message):
            message = Message.model_validate(message)
        prepared.append(message.model_dump(mode="json"))
    return prepared


def parse_memories(data: Any) -> list[Memory]:
    """Parse a memory list.

    Accepts a bare list, the v1.1 ``{"results": [...]}`` envelope, or a single
    record. Any other object (e.g. an async-mode acknowledgement) yields [].
    """
    if isinstance(data, dict):
        if "results" in data:
            data = data["results"]
        elif "id" in data:
            data = [data]
        else:
            return []
    return _memory_list.validate_python(data)


def parse_history(data: Any) -> list[MemoryHistory]:
    return _history_list.validate_python(data)


def decode_response(response: httpx.Response) -> Any:
    """Raise the APIError for a failed response, or return its JSON body.

    The error detail is the response body text, or the reason phrase when the
    body is empty.
    """
    if not response.is_success:
        detail = response.text or response.reason_phrase
        raise api_error_for_status(response.status_code, detail)

    # No Content
    if response.status_code == 204 or not response.content:
        return {}

    return response.json()


class BaseMemoryClient:
    """
    Configuration and request construction for the Mem0 cloud API.

    Not used directly; see MemoryClient and SyncMemoryClient.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        host: Optional[str] = None,
        organization_id: Optional[Union[str, int]] = None,
        project_id: Optional[Union[str, int]] = None,
        organization_name: Optional[str] = None,
        project_name: Optional[str] = None,
    ):
        """
        Initialize the client. No network call is made.

        Args:
            api_key: Mem0 API key (default: MEM0_API_KEY environment variable)
            host: API base URL (default: MEM0_API_HOST or https://api.mem0.ai)
            organization_id: Organization ID, set together with project_id
            project_id: Project ID, set together with organization_id
            organization_name: Deprecated, use organization_id
            project_name: Deprecated, use project_id

        Raises:
            ValueError: API key missing or blank
            TypeError: API key is not a string
        """
        if api_key is None:
            api_key = os.environ.get(API_KEY_ENV_VAR)
        self._validate_api_key(api_key)

        self._api_key: str = api_key
        self.host = (host or os.environ.get(HOST_ENV_VAR) or DEFAULT_HOST).rstrip("/")
        self.organization_id = organization_id
        self.project_id = project_id
        self.organization_name = organization_name
        self.project_name = project_name
        self.timeout = REQUEST_TIMEOUT

        self._check_org_project()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(host={self.host!r}, "
            f"organization_id={self.organization_id!r}, project_id={self.project_id!r})"
        )

    @staticmethod
    def _validate_api_key(api_key: Any) -> None:
        if not api_key:
            raise ValueError("Mem0 API key is required")
        if not isinstance(api_key, str):
            raise TypeError("Mem0 API key must be a string")
        if not api_key.strip():
            raise ValueError("Mem0 API key cannot be empty")

    def _check_org_project(self) -> None:
        if (self.organization_name is None) != (self.project_name is None):
            logger.warning(
                "Both organization_name and project_name must be provided together. "
                "Note: organization_name/project_name are deprecated in favor of "
                "organization_id/project_id."
            )
        if (self.organization_id is None) != (self.project_id is None):
            logger.warning("Both organization_id and project_id must be provided together.")

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "Authorization": f"Token {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _timeout_message(self, request: PreparedRequest) -> str:
        return f"Request timeout after {int(self.timeout * 1000)}ms for {self.host}{request.path}"

    # Scope and options

    def _scoped(self, options: dict[str, Any]) -> dict[str, Any]:
        """Add the client's org/project scope. The ID pair replaces the name pair."""
        result = dict(options)

        if self.organization_name is not None and self.project_name is not None:
            result["org_name"] = self.organization_name
            result["project_name"] = self.project_name

        if self.organization_id is not None and self.project_id is not None:
            result["org_id"] = self.organization_id
            result["project_id"] = self.project_id
            result.pop("org_name", None)
            result.pop("project_name", None)

        return result

    @staticmethod
    def _options(model: type[MemoryOptions], options: dict[str, Any]) -> dict[str, Any]:
        return model(**options).model_dump(exclude_none=True, mode="json")

    @staticmethod
    def _pop_api_version(options: dict[str, Any]) -> Optional[str]:
        """Remove api_version from options; fall back to ``version`` if it names one."""
        api_version = options.pop("api_version", None)
        if api_version is None and options.get("version") in (APIVersion.V1.value, APIVersion.V2.value):
            api_version = options["version"]
        return api_version

    @staticmethod
    def _pagination(page: Optional[int], page_size: Optional[int]) -> dict[str, str]:
        if page and page_size:
            return {"page": str(page), "page_size": str(page_size)}
        return {}

    def _require_org_project(self, action: str) -> None:
        if not (self.organization_id and self.project_id):
            raise ValueError(f"organization_id and project_id must be set to {action} project settings")

    def _project_path(self) -> str:
        return f"/api/v1/orgs/organizations/{self.organization_id}/projects/{self.project_id}/"

    # Requests

    def _ping_request(self) -> PreparedRequest:
        return PreparedRequest("GET", "/v1/ping/")

    def _handle_ping(self, data: Any) -> None:
        """Check the ping payload and learn org/project ids the client lacks."""
        if not isinstance(data, dict):
            raise ServerError("Invalid response format from ping endpoint")

        if data.get("status") != "ok":
            raise AuthenticationError(data.get("message") or "API Key is invalid")

        if data.get("org_id") and not self.organization_id:
            self.organization_id = data["org_id"]
            logger.debug("Using organization_id %s from ping response", self.organization_id)
        if data.get("project_id") and not self.project_id:
            self.project_id = data["project_id"]
            logger.debug("Using project_id %s from ping response", self.project_id)

    def _add_request(self, messages: MessagesInput, options: dict[str, Any]) -> PreparedRequest:
        opts = self._scoped(self._options(MemoryOptions, options))
        if opts.get("api_version"):
            opts["version"] = str(opts["api_version"])

        payload = {"messages": prepare_messages(messages), **opts}
        return PreparedRequest("POST", "/v1/memories/", body=payload)

    def _get_request(self, memory_id: str) -> PreparedRequest:
        return PreparedRequest("GET", f"/v1/memories/{memory_id}/")

    def _get_all_request(self, options: dict[str, Any]) -> PreparedRequest:
        opts = self._options(SearchOptions, options)
        api_version = self._pop_api_version(opts)
        pagination = self._pagination(opts.pop("page", None), opts.pop("page_size", None))
        opts = self._scoped(opts)

        if api_version == APIVersion.V2.value:
            return PreparedRequest("POST", "/v2/memories/", params=pagination or None, body=opts)

        return PreparedRequest("GET", "/v1/memories/", params={**prepare_params(opts), **pagination})

    def _search_request(self, query: str, options: dict[str, Any]) -> PreparedRequest:
        opts = self._options(SearchOptions, options)
        api_version = self._pop_api_version(opts)
        payload = {"query": query, **self._scoped(opts)}

        version = "v2" if api_version == APIVersion.V2.value else "v1"
        return PreparedRequest("POST", f"/{version}/memories/search/", body=payload)

    def _update_request(
        self,
        memory_id: str,
        text: Optional[str],
        metadata: Optional[dict[str, Any]],
    ) -> PreparedRequest:
        if text is None and metadata is None:
            raise ValueError("Either text or metadata must be provided for update.")

        payload: dict[str, Any] = {}
        if text is not None:
            payload["text"] = text
        if metadata is not None:
            payload["metadata"] = metadata
        return PreparedRequest("PUT", f"/v1/memories/{memory_id}/", body=payload)

    def _delete_request(self, memory_id: str) -> PreparedRequest:
        return PreparedRequest("DELETE", f"/v1/memories/{memory_id}/")

    def _delete_all_request(self, options: dict[str, Any]) -> PreparedRequest:
        opts = self._scoped(self._options(MemoryOptions, options))
        return PreparedRequest("DELETE", "/v1/memories/", params=prepare_params(opts))

    def _history_request(self, memory_id: str) -> PreparedRequest:
        return PreparedRequest("GET", f"/v1/memories/{memory_id}/history/")

    def _users_request(self) -> PreparedRequest:
        return PreparedRequest("GET", "/v1/entities/", params=prepare_params(self._scoped({})))

    def _delete_entity_request(
        self,
        entity_type: Union[str, EntityType],
        name: Union[str, int],
        api_version: APIVersion = APIVersion.V2,
    ) -> PreparedRequest:
        """Delete one entity. The v1 path addresses it by numeric id, v2 by name."""
        entity_type = _to_value(entity_type)
        if api_version == APIVersion.V1:
            return PreparedRequest("DELETE", f"/v1/entities/{entity_type}/{name}/")
        return PreparedRequest(
            "DELETE",
            f"/v2/entities/{entity_type}/{name}/",
            params=prepare_params(self._scoped({})),
        )

    @staticmethod
    def _targeted_entities(
        user_id: Optional[str],
        agent_id: Optional[str],
        app_id: Optional[str],
        run_id: Optional[str],
    ) -> Optional[list[tuple[str, str]]]:
        """The single entity named by the first given identifier, or None for all."""
        if user_id:
            return [(EntityType.USER.value, user_id)]
        elif agent_id:
            return [(EntityType.AGENT.value, agent_id)]
        elif app_id:
            return [(EntityType.APP.value, app_id)]
        elif run_id:
            return [(EntityType.RUN.value, run_id)]
        return None

    @staticmethod
    def _listed_entities(users: AllUsers) -> list[tuple[str, str]]:
        entities = [(user.type or EntityType.USER.value, user.name) for user in users.results]
        if not entities:
            raise ValueError("No entities to delete")
        return entities

    def _batch_update_request(self, memories: Iterable[UpdateInput]) -> PreparedRequest:
        bodies = [
            (m if isinstance(m, MemoryUpdateBody) else MemoryUpdateBody.model_validate(m)).model_dump()
            for m in memories
        ]
        return PreparedRequest("PUT", "/v1/batch/", body={"memories": bodies})

    def _batch_delete_request(self, memory_ids: Iterable[str]) -> PreparedRequest:
        return PreparedRequest("DELETE", "/v1/batch/", body={"memories": [{"memory_id": i} for i in memory_ids]})

    def _get_project_request(self, fields: Optional[list[str]]) -> PreparedRequest:
        self._require_org_project("access")
        params = {"fields": list(fields)} if fields else None
        return PreparedRequest("GET", self._project_path(), params=params)

    def _update_project_request(self, prompts: dict[str, Any]) -> PreparedRequest:
        self._require_org_project("update")
        return PreparedRequest("PATCH", self._project_path(), body=prompts)

    def _get_webhooks_request(self, project_id: Optional[str]) -> PreparedRequest:
        project_id = project_id or self.project_id
        return PreparedRequest("GET", f"/api/v1/webhooks/projects/{project_id}/")

    def _create_webhook_request(self, webhook: WebhookPayload) -> PreparedRequest:
        project_id = webhook.project_id or self.project_id
        return PreparedRequest(
            "POST",
            f"/api/v1/webhooks/projects/{project_id}/",
            body=webhook.model_dump(by_alias=True, exclude_none=True),
        )

    def _update_webhook_request(self, webhook: WebhookPayload) -> PreparedRequest:
        if webhook.project_id is None and self.project_id is not None:
            webhook = webhook.model_copy(update={"project_id": str(self.project_id)})
        return PreparedRequest(
            "PUT",
            f"/api/v1/webhooks/{webhook.webhook_id}/",
            body=webhook.model_dump(by_alias=True, exclude_none=True),
        )

    def _delete_webhook_request(self, webhook_id: str) -> PreparedRequest:
        return PreparedRequest("DELETE", f"/api/v1/webhooks/{webhook_id}/")

    def _feedback_request(
        self,
        memory_id: str,
        feedback: Optional[Union[str, Feedback]],
        feedback_reason: Optional[str],
    ) -> PreparedRequest:
        payload = FeedbackPayload(memory_id=memory_id, feedback=feedback, feedback_reason=feedback_reason)
        return PreparedRequest("POST", "/v1/feedback/", body=payload.model_dump(mode="json"))

    def _scope_ids(self) -> tuple[Optional[str], Optional[str]]:
        org_id = str(self.organization_id) if self.organization_id is not None else None
        project_id = str(self.project_id) if self.project_id is not None else None
        return org_id, project_id

    def _create_export_request(
        self,
        schema: Optional[dict[str, Any]],
        filters: Optional[dict[str, Any]],
        export_instructions: Optional[str],
    ) -> PreparedRequest:
        if filters is None or schema is None:
            raise ValueError("Missing filters or schema")

        org_id, project_id = self._scope_ids()
        payload = CreateMemoryExportPayload(
            export_schema=schema,
            filters=filters,
            export_instructions=export_instructions,
            org_id=org_id,
            project_id=project_id,
        )
        body = payload.model_dump(by_alias=True)
        if export_instructions is None:
            del body["export_instructions"]
        return PreparedRequest("POST", "/v1/exports/", body=body)

    def _get_export_request(
        self,
        memory_export_id: Optional[str],
        filters: Optional[dict[str, Any]],
    ) -> PreparedRequest:
        if not memory_export_id and filters is None:
            raise ValueError("Missing memory_export_id or filters")

        org_id, project_id = self._scope_ids()
        payload = GetMemoryExportPayload(
            memory_export_id=memory_export_id,
            filters=filters,
            org_id=org_id or "",
            project_id=project_id or "",
        )
        return PreparedRequest("POST", "/v1/exports/get/", body=payload.model_dump(exclude_none=True))
