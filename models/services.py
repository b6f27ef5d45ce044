# models/services.py
from __future__ import annotations

from pydantic import Field

from models.record import Record


class ServiceInfo(Record):
    name: str
    running: bool = False
    startmode: str = ''
    pids: list[int] = Field(default_factory=list)
    pcpu: float = 0.0
    pmem: float = 0.0

    # LINUX
    @classmethod
    def unit_name(cls, entry: dict) -> str:
        """'nginx.service' from `systemctl --output=json` -> 'nginx'"""
        unit = entry.get('unit') or entry.get('name') or ''
        return unit[:-len('.service')] if unit.endswith('.service') else unit

    # MAC
    @classmethod
    def launchd_label(cls, line: str) -> str | None:
        """One row of `launchctl list`: PID, status, label."""
        parts = line.split()
        if len(parts) < 3 or parts[0] == 'PID':
            return None
        return parts[2]

    # ALL
    @classmethod
    def from_processes(cls, name: str, processes: list[dict], startmode: str = '') -> ServiceInfo:
        pids = [p['pid'] for p in processes]
        return cls(
            name=name,
            running=bool(pids),
            startmode=startmode,
            pids=pids,
            pcpu=round(sum(p.get('cpu_percent') or 0.0 for p in processes), 2),
            pmem=round(sum(p.get('memory_percent') or 0.0 for p in processes), 2),
        )
