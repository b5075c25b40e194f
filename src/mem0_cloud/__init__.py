"""Mem0 cloud Python SDK - the memory layer for AI apps."""

from .client import MemoryClient
from .exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    Mem0Error,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from .models import (
    AllUsers,
    ExportResponse,
    ImageURL,
    Memory,
    MemoryData,
    MemoryHistory,
    MemoryOptions,
    MemoryUpdateBody,
    Message,
    MessageResponse,
    MultiModalContent,
    ProjectOptions,
    ProjectResponse,
    SearchOptions,
    User,
    Webhook,
    WebhookPayload,
)
from .sync_client import SyncMemoryClient, sync_client
from .types import APIVersion, EntityType, Feedback, MemoryEvent, OutputFormat

__version__ = "0.1.0"

__all__ = [
    # Main clients
    "MemoryClient",
    "SyncMemoryClient",
    "sync_client",
    # Models
    "Memory",
    "MemoryData",
    "MemoryHistory",
    "Message",
    "MultiModalContent",
    "ImageURL",
    "User",
    "AllUsers",
    "Webhook",
    "WebhookPayload",
    "ProjectResponse",
    "MessageResponse",
    "ExportResponse",
    "MemoryUpdateBody",
    # Options
    "MemoryOptions",
    "SearchOptions",
    "ProjectOptions",
    # Types
    "APIVersion",
    "OutputFormat",
    "Feedback",
    "EntityType",
    "MemoryEvent",
    # Exceptions
    "Mem0Error",
    "APIError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
]
