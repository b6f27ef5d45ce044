# models/network.py
from __future__ import annotations

from models.record import Record


class SiteCheck(Record):
    url: str
    ok: bool = False
    status: int = 404
    ms: int | None = None
