"""Type definitions and enums for the Mem0 cloud SDK."""

from enum import Enum


class APIVersion(str, Enum):
    """Wire format for the listing and search endpoints."""

    V1 = "v1"  # Query parameters, GET
    V2 = "v2"  # JSON body filters (AND/OR), POST


class OutputFormat(str, Enum):
    """Output format version for memory responses."""

    V1 = "v1.0"
    V1_1 = "v1.1"  # Wraps results in {"results": [...]}


class Feedback(str, Enum):
    """Feedback on the quality of a memory."""

    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    VERY_NEGATIVE = "VERY_NEGATIVE"


class EntityType(str, Enum):
    """Kinds of entities that own memories."""

    USER = "user"
    AGENT = "agent"
    APP = "app"
    RUN = "run"


class MemoryEvent(str, Enum):
    """Event recorded for a memory change."""

    ADD = "ADD"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    NOOP = "NOOP"
