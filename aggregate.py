# aggregate.py
from __future__ import annotations

import asyncio
import logging

import psutil

from collectors.base import BaseOSCollector
from models.unified import DynamicData
from models.unified import LoadSnapshot
from models.unified import MemorySnapshot
from models.unified import StaticData
from os_env import APP_VERSION

logger = logging.getLogger(__name__)


async def get_static_data(collector: BaseOSCollector) -> StaticData:
    """
    Full inventory sweep.

    All seven collectors are dispatched at once and joined a single time, so
    the result resolves exactly once, after the slowest collector. Nothing is
    cached: every call probes the host again.
    """
    system, bios, baseboard, chassis, os_info, uuid, versions = await asyncio.gather(
        collector.system(),
        collector.bios(),
        collector.baseboard(),
        collector.chassis(),
        collector.os_info(),
        collector.uuid(),
        collector.versions('*'),
    )
    logger.debug(f"Static data collected with {collector.__class__.__name__}")

    return StaticData(
        version=APP_VERSION,
        system=system,
        bios=bios,
        baseboard=baseboard,
        chassis=chassis,
        os=os_info,
        uuid=uuid,
        versions=versions,
    )


# ------------------------------
# DYNAMIC
# ------------------------------
def load_snapshot() -> LoadSnapshot:
    cpus = psutil.cpu_percent(interval=None, percpu=True)
    current = round(sum(cpus) / len(cpus), 2) if cpus else 0.0
    return LoadSnapshot(current_load=current, cpus=cpus)


def memory_snapshot() -> MemorySnapshot:
    mem = psutil.virtual_memory()
    return MemorySnapshot(
        total=mem.total,
        free=mem.free,
        used=mem.used,
        # 'active' only exists on Linux/macOS/BSD
        active=getattr(mem, 'active', mem.used),
        available=mem.available,
    )


async def get_dynamic_data(collector: BaseOSCollector, services: str | None = '*') -> DynamicData:
    load, mem, srv = await asyncio.gather(
        asyncio.to_thread(load_snapshot),
        asyncio.to_thread(memory_snapshot),
        collector.services(services),
    )
    return DynamicData(time=collector.time(), current_load=load, mem=mem, services=srv)
