# core/domain/entities/base_entity.py
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class DomainEntity(BaseModel):
    """
    Base entity for market data values.

    - Entities are rebuilt on every request and never persisted.
    - Accepts extra fields to avoid breaking when upstream adds columns.
    - Enums are stored as their values so payloads stay plain JSON.
    """

    model_config = ConfigDict(
        extra="allow",
        use_enum_values=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-safe dict for HTTP payloads and logging.
        """
        return self.model_dump(mode="json", exclude_none=True)
