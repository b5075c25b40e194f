"""Main client for the Mem0 cloud SDK."""

import asyncio
import logging
import warnings
from typing import Any, Iterable, Optional, Union

import httpx

from .base import (
    ALL_ENTITIES_DELETED,
    ENTITY_DELETED,
    BaseMemoryClient,
    MessagesInput,
    PreparedRequest,
    UpdateInput,
    decode_response,
    parse_history,
    parse_memories,
)
from .exceptions import Mem0Error
from .models import (
    AllUsers,
    ExportResponse,
    Memory,
    MemoryHistory,
    MessageResponse,
    ProjectResponse,
    Webhook,
    WebhookPayload,
)
from .types import APIVersion, Feedback

logger = logging.getLogger(__name__)


class MemoryClient(BaseMemoryClient):
    """
    Async Python client for the Mem0 cloud API.

    Usage:
        async with MemoryClient(api_key="your-api-key") as client:
            # Store memories from a conversation
            memories = await client.add(
                [{"role": "user", "content": "I prefer dark mode"}],
                user_id="alice",
            )

            # Search memories
            results = await client.search("What are my preferences?", user_id="alice")

    The HTTP connection is opened on first use when the client is not used as
    a context manager; call ``aclose()`` when done.
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
        super().__init__(
            api_key=api_key,
            host=host,
            organization_id=organization_id,
            project_id=project_id,
            organization_name=organization_name,
            project_name=project_name,
        )
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "MemoryClient":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure client is initialized."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.host,
                headers=self.headers,
                timeout=self.timeout,
            )
        return self._client

    async def _request(self, request: PreparedRequest) -> Any:
        """
        Send a prepared request with error handling.

        Returns:
            Decoded response JSON

        Raises:
            APIError: Non-success HTTP status (subclassed by status)
            Mem0Error: Timeout or other transport failure
        """
        client = self._ensure_client()
        logger.debug("%s %s%s", request.method, self.host, request.path)

        try:
            response = await asyncio.wait_for(
                client.request(
                    request.method,
                    request.path,
                    params=request.params,
                    json=request.body,
                ),
                timeout=self.timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise Mem0Error(self._timeout_message(request)) from e
        except httpx.HTTPError as e:
            raise Mem0Error(f"HTTP error: {e}") from e

        return decode_response(response)

    async def ping(self) -> None:
        """
        Check connectivity and validate the API key.

        Learns organization_id/project_id from the response when they were
        not configured.

        Raises:
            AuthenticationError: The API reports the key as invalid
        """
        data = await self._request(self._ping_request())
        self._handle_ping(data)

    # Memory operations

    async def add(self, messages: MessagesInput, **options: Any) -> list[Memory]:
        """
        Add memories from conversation messages.

        Args:
            messages: Conversation turns (Message models or dicts), or a single string
            **options: MemoryOptions fields, e.g. user_id, agent_id, metadata, api_version

        Returns:
            Created memories (empty when nothing was extracted)

        Example:
            memories = await client.add(
                [
                    {"role": "user", "content": "I'm planning a trip to Tokyo next month."},
                    {"role": "assistant", "content": "Great! I'll remember that."},
                ],
                user_id="alice",
            )
        """
        data = await self._request(self._add_request(messages, options))
        return parse_memories(data)

    async def get(self, memory_id: str) -> Memory:
        """
        Get a specific memory.

        Args:
            memory_id: Memory ID

        Returns:
            Memory
        """
        data = await self._request(self._get_request(memory_id))
        return Memory.model_validate(data)

    async def get_all(self, **options: Any) -> list[Memory]:
        """
        List memories matching filters.

        With ``api_version="v2"`` the options are sent as a JSON body (which
        supports AND/OR ``filters``); otherwise as query parameters. ``page``
        and ``page_size`` are only sent when both are given.

        Args:
            **options: SearchOptions fields

        Returns:
            Matching memories

        Example:
            memories = await client.get_all(user_id="alice", page=1, page_size=10)
        """
        data = await self._request(self._get_all_request(options))
        return parse_memories(data)

    async def search(self, query: str, **options: Any) -> list[Memory]:
        """
        Search memories by semantic similarity.

        Args:
            query: Natural language search query
            **options: SearchOptions fields, e.g. user_id, limit, threshold, filters

        Returns:
            Memories with a ``score``, most relevant first; empty when nothing matches

        Example:
            results = await client.search(
                "What are my travel plans?",
                user_id="alice",
                threshold=0.7,
            )
        """
        data = await self._request(self._search_request(query, options))
        return parse_memories(data)

    async def update(
        self,
        memory_id: str,
        text: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> list[Memory]:
        """
        Update a memory's text and/or metadata.

        Raises:
            ValueError: Neither text nor metadata given (no request is sent)
        """
        data = await self._request(self._update_request(memory_id, text, metadata))
        return parse_memories(data)

    async def delete(self, memory_id: str) -> MessageResponse:
        """Delete a memory."""
        data = await self._request(self._delete_request(memory_id))
        return MessageResponse.model_validate(data)

    async def delete_all(self, **options: Any) -> MessageResponse:
        """
        Delete all memories matching filters.

        Example:
            await client.delete_all(user_id="alice")
        """
        data = await self._request(self._delete_all_request(options))
        return MessageResponse.model_validate(data)

    async def history(self, memory_id: str) -> list[MemoryHistory]:
        """Get the change history of a memory, in the order the API returns it."""
        data = await self._request(self._history_request(memory_id))
        return parse_history(data)

    # Entity operations

    async def users(self) -> AllUsers:
        """List users, agents, apps and runs that own memories."""
        data = await self._request(self._users_request())
        return AllUsers.model_validate(data)

    async def delete_user(self, entity_id: Union[str, int], entity_type: str = "user") -> MessageResponse:
        """
        Delete an entity by numeric ID.

        .. deprecated::
            Use :meth:`delete_users` instead.
        """
        warnings.warn(
            "delete_user() is deprecated, use delete_users() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        data = await self._request(self._delete_entity_request(entity_type, entity_id, APIVersion.V1))
        return MessageResponse.model_validate(data)

    async def delete_users(
        self,
        user_id: Optional[str] = None,
        agent_id: Optional[str] = None,
        app_id: Optional[str] = None,
        run_id: Optional[str] = None,
    ) -> MessageResponse:
        """
        Delete one entity, or every entity when no identifier is given.

        The first identifier given (user, agent, app, run) selects the entity.
        Without one, all entities from :meth:`users` are deleted one request
        at a time, in listing order. This is not atomic: if a delete fails the
        error propagates at once, earlier deletions stay applied and the rest
        are not attempted.

        Raises:
            ValueError: No identifier given and no entities exist
        """
        entities = self._targeted_entities(user_id, agent_id, app_id, run_id)
        if entities is None:
            entities = self._listed_entities(await self.users())

        for entity_type, name in entities:
            await self._request(self._delete_entity_request(entity_type, name))

        targeted = user_id or agent_id or app_id or run_id
        return MessageResponse(message=ENTITY_DELETED if targeted else ALL_ENTITIES_DELETED)

    # Batch operations

    async def batch_update(self, memories: Iterable[UpdateInput]) -> MessageResponse:
        """
        Update several memories in one request.

        Example:
            await client.batch_update([
                {"memory_id": "mem_1", "text": "Updated text 1"},
                MemoryUpdateBody(memory_id="mem_2", text="Updated text 2"),
            ])
        """
        data = await self._request(self._batch_update_request(memories))
        return MessageResponse.model_validate(data)

    async def batch_delete(self, memory_ids: Iterable[str]) -> MessageResponse:
        """Delete several memories in one request."""
        data = await self._request(self._batch_delete_request(memory_ids))
        return MessageResponse.model_validate(data)

    # Project operations

    async def get_project(self, fields: Optional[list[str]] = None) -> ProjectResponse:
        """
        Get project settings.

        Args:
            fields: Restrict the response to these fields

        Raises:
            ValueError: organization_id and project_id are not both set
        """
        data = await self._request(self._get_project_request(fields))
        return ProjectResponse.model_validate(data)

    async def update_project(self, **prompts: Any) -> dict[str, Any]:
        """
        Update project settings such as custom_instructions or custom_categories.

        Raises:
            ValueError: organization_id and project_id are not both set
        """
        return await self._request(self._update_project_request(prompts))

    # Webhook operations

    async def get_webhooks(self, project_id: Optional[str] = None) -> list[Webhook]:
        """List webhooks of a project (default: the client's project)."""
        data = await self._request(self._get_webhooks_request(project_id))
        return [Webhook.model_validate(w) for w in data]

    async def create_webhook(
        self,
        name: str,
        url: str,
        event_types: list[str],
        project_id: Optional[str] = None,
    ) -> Webhook:
        """
        Create a webhook.

        Example:
            webhook = await client.create_webhook(
                name="Memory Updates",
                url="https://myapp.com/webhooks/mem0",
                event_types=["memory_add", "memory_update"],
            )
        """
        payload = WebhookPayload(name=name, url=url, event_types=event_types, project_id=project_id)
        data = await self._request(self._create_webhook_request(payload))
        return Webhook.model_validate(data)

    async def update_webhook(
        self,
        webhook_id: str,
        name: Optional[str] = None,
        url: Optional[str] = None,
        event_types: Optional[list[str]] = None,
        project_id: Optional[str] = None,
    ) -> MessageResponse:
        """Update a webhook."""
        payload = WebhookPayload(
            webhook_id=webhook_id,
            name=name,
            url=url,
            event_types=event_types,
            project_id=project_id,
        )
        data = await self._request(self._update_webhook_request(payload))
        return MessageResponse.model_validate(data)

    async def delete_webhook(self, webhook_id: str) -> MessageResponse:
        """Delete a webhook."""
        data = await self._request(self._delete_webhook_request(webhook_id))
        return MessageResponse.model_validate(data)

    # Feedback and exports

    async def feedback(
        self,
        memory_id: str,
        feedback: Optional[Union[str, Feedback]] = None,
        feedback_reason: Optional[str] = None,
    ) -> MessageResponse:
        """
        Submit feedback on a memory.

        Example:
            await client.feedback("mem_123", Feedback.POSITIVE, "Very helpful memory")
        """
        data = await self._request(self._feedback_request(memory_id, feedback, feedback_reason))
        return MessageResponse.model_validate(data)

    async def create_memory_export(
        self,
        schema: Optional[dict[str, Any]] = None,
        filters: Optional[dict[str, Any]] = None,
        export_instructions: Optional[str] = None,
    ) -> ExportResponse:
        """
        Start a memory export job.

        Args:
            schema: Structure of the exported data
            filters: Selects the memories to export
            export_instructions: Extra instructions for the export

        Raises:
            ValueError: schema or filters missing (no request is sent)
        """
        data = await self._request(self._create_export_request(schema, filters, export_instructions))
        return ExportResponse.model_validate(data)

    async def get_memory_export(
        self,
        memory_export_id: Optional[str] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> ExportResponse:
        """
        Get a memory export by ID or filters.

        Raises:
            ValueError: Neither memory_export_id nor filters given (no request is sent)
        """
        data = await self._request(self._get_export_request(memory_export_id, filters))
        return ExportResponse.model_validate(data)
