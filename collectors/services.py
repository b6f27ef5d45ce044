# collectors/services.py
from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable
from collections.abc import Callable

import psutil

from models.services import ServiceInfo

WILDCARD = '*'


def parse_service_selector(names: str | None) -> list[str]:
    """
    'nginx'            -> ['nginx']
    'nginx, mysql ssh' -> ['nginx', 'mysql', 'ssh']
    '*'                -> ['*']
    Empty input selects nothing.
    """
    parts = [p.strip() for p in re.split(r'[,\s|]+', names or '') if p.strip()]
    if WILDCARD in parts:
        return [WILDCARD]
    seen: list[str] = []
    for p in parts:
        if p not in seen:
            seen.append(p)
    return seen


def process_table() -> list[dict]:
    """Snapshot of running processes (pid, name, cpu %, mem %)."""
    rows = []
    for proc in psutil.process_iter(['pid', 'name', 'cpu_percent', 'memory_percent']):
        try:
            rows.append(dict(proc.info))
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    return rows


def match_processes(name: str, processes: list[dict]) -> list[dict]:
    wanted = name.lower()
    return [p for p in processes if wanted in (p.get('name') or '').lower()]


async def collect_services(
    names: str | None,
    list_names: Callable[[], Awaitable[list[str]]],
    startmodes: Callable[[list[str]], Awaitable[dict[str, str]]] | None = None,
) -> list[ServiceInfo]:
    """
    Shared service enumeration for POSIX collectors.

    `list_names` resolves the wildcard to the platform's service names;
    process statistics always come from psutil.
    """
    selected = parse_service_selector(names)
    if not selected:
        return []

    if selected == [WILDCARD]:
        selected = await list_names()

    processes = await asyncio.to_thread(process_table)
    modes = await startmodes(selected) if startmodes else {}

    return [
        ServiceInfo.from_processes(name, match_processes(name, processes), modes.get(name, ''))
        for name in selected
    ]
