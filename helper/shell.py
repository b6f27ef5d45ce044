# helper/shell.py
from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from os_env import PROBE_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """Captured output of one probe. `failed` covers missing binaries and non-zero exits."""
    stdout: str = ''
    failed: bool = False

    def lines(self) -> list[str]:
        return self.stdout.splitlines()

    @classmethod
    def failure(cls) -> ProbeResult:
        return cls('', True)


class ProbeRunner:
    """
    Runs external commands and reads pseudo-files for the collectors.

    Two scheduling modes are offered:
    - run_sync(): blocks the caller. Reserved for trivial local reads.
    - run(): awaits an asyncio subprocess, so other probes keep running.

    Nothing here raises on probe failure. A failing command always comes back as
    ProbeResult(stdout='', failed=True) and the caller picks its fallback.
    """

    def __init__(self, timeout: float | None = PROBE_TIMEOUT):
        self.timeout = timeout

    # ------------------------------
    # BLOCKING
    # ------------------------------
    def run_sync(self, command: str) -> ProbeResult:
        try:
            proc = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"Probe timed out: {command}")
            return ProbeResult.failure()
        except OSError as e:
            logger.debug(f"Probe could not start: {command} ({e})")
            return ProbeResult.failure()

        if proc.returncode != 0:
            logger.debug(f"Probe exited with {proc.returncode}: {command}")
            return ProbeResult.failure()

        return ProbeResult(proc.stdout.decode('utf-8', errors='replace'), False)

    # ------------------------------
    # NON-BLOCKING
    # ------------------------------
    async def run(self, command: str) -> ProbeResult:
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.debug(f"Probe could not start: {command} ({e})")
            return ProbeResult.failure()

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.debug(f"Probe timed out: {command}")
            return ProbeResult.failure()

        if proc.returncode != 0:
            logger.debug(f"Probe exited with {proc.returncode}: {command}")
            return ProbeResult.failure()

        return ProbeResult(stdout.decode('utf-8', errors='replace'), False)

    def run_callback(self, command: str, callback: Callable[[str, bool], None]) -> asyncio.Task:
        """
        Continuation style: schedules the probe and calls callback(stdout, failed)
        once it completes. Must be called from inside a running event loop.
        """
        async def _runner():
            result = await self.run(command)
            callback(result.stdout, result.failed)
            return result

        return asyncio.ensure_future(_runner())

    # ------------------------------
    # PSEUDO-FILES
    # ------------------------------
    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_text(self, path: str) -> str:
        """Reads a pseudo-file such as /proc/cpuinfo. Returns '' when unreadable."""
        try:
            with open(path, encoding='utf-8', errors='replace') as f:
                return f.read()
        except OSError:
            return ''

    def list_dir(self, path: str) -> list[str]:
        try:
            return sorted(os.listdir(path))
        except OSError:
            return []
