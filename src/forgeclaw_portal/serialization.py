"""
forgeclaw_portal.serialization

Shared pydantic base for JSON payloads exchanged with the portal frontend and Northflank.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # Python code uses snake_case; the wire format (frontend + vendor) is camelCase.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
