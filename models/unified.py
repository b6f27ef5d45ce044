# models/unified.py
from __future__ import annotations

from typing import Any

from pydantic import Field

from models.hardware import BaseboardInfo
from models.hardware import BiosInfo
from models.hardware import ChassisInfo
from models.hardware import SystemIdentity
from models.osinfo import OsInfo
from models.osinfo import TimeInfo
from models.osinfo import UuidInfo
from models.osinfo import VersionReport
from models.record import Record
from models.services import ServiceInfo


class StaticData(Record):
    """Rarely-changing facts, gathered in one concurrent sweep."""
    version: str
    system: SystemIdentity
    bios: BiosInfo
    baseboard: BaseboardInfo
    chassis: ChassisInfo
    os: OsInfo
    uuid: UuidInfo
    versions: VersionReport

    def to_json(self) -> dict[str, Any]:
        return {
            'version': self.version,
            'system': self.system.to_json(),
            'bios': self.bios.to_json(),
            'baseboard': self.baseboard.to_json(),
            'chassis': self.chassis.to_json(),
            'os': self.os.to_json(),
            'uuid': self.uuid.to_json(),
            'versions': self.versions.to_json(),
        }


class LoadSnapshot(Record):
    current_load: float = Field(0.0, alias='currentLoad')
    cpus: list[float] = Field(default_factory=list)


class MemorySnapshot(Record):
    total: int = 0
    free: int = 0
    used: int = 0
    active: int = 0
    available: int = 0


class DynamicData(Record):
    """Frequently-changing facts, re-read on every request."""
    time: TimeInfo
    current_load: LoadSnapshot = Field(alias='currentLoad')
    mem: MemorySnapshot
    services: list[ServiceInfo] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            'time': self.time.to_json(),
            'currentLoad': self.current_load.to_json(),
            'mem': self.mem.to_json(),
            'services': [s.to_json() for s in self.services],
        }
