"""Shared types and base models used across the scoring engine."""

from datetime import datetime, timezone
from typing import Annotated, Any, Mapping
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


# --- Reusable annotated types ---

UUIDv7 = Annotated[UUID, Field(description="Time-sortable UUID v7.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Base model ---


class ScoringBase(BaseModel):
    """Base model with common configuration for all scoring Pydantic models.

    Field names are snake_case; the camelCase keys used by the request
    wizard payloads are accepted through aliases.
    """

    model_config = {
        "populate_by_name": True,
        "protected_namespaces": (),
    }

    @classmethod
    def canonical_keys(cls, mapping: Mapping[str, Any]) -> dict[str, Any]:
        """Re-key *mapping* by field name, translating camelCase aliases.

        Unknown keys are kept as-is so validation can reject them.
        """
        by_alias = {
            field.alias: name
            for name, field in cls.model_fields.items()
            if field.alias
        }
        return {by_alias.get(key, key): value for key, value in mapping.items()}
