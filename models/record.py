# models/record.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict


class Record(BaseModel):
    """
    Base for every inventory record: immutable once built, serialised with the
    camelCase names the HTTP API has always used.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)
