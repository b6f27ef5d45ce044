# collectors/base.py
from __future__ import annotations

import time as _time
from datetime import datetime

import psutil

from collectors.platform_tag import HostIdentity
from collectors.versions import VersionProber
from collectors.versions import empty_report
from helper.parsing import first_line
from helper.parsing import get_value
from helper.shell import ProbeRunner
from models.hardware import BaseboardInfo
from models.hardware import BiosInfo
from models.hardware import ChassisInfo
from models.hardware import SystemIdentity
from models.hardware import defaults_of
from models.osinfo import OsInfo
from models.osinfo import TimeInfo
from models.osinfo import UuidInfo
from models.osinfo import VersionReport
from models.record import Record
from models.services import ServiceInfo


class BaseOSCollector:
    """
    Common shape of every platform collector.

    Each operation here returns the all-default record without running a single
    probe. Platform subclasses override what their OS can answer; anything they
    leave alone keeps this default-safe behaviour.

    Collectors never raise for probe failures. The only surfaced error is
    UnsupportedOperation, for operations a platform structurally lacks.
    """

    # platforms with a usable shell opt into the shell and tool version probes
    shell_probes = False

    def __init__(self, host: HostIdentity, runner: ProbeRunner | None = None):
        self.host = host
        self.runner = runner or ProbeRunner()

    # ------------------------------
    # HARDWARE
    # ------------------------------
    async def system(self) -> SystemIdentity:
        return SystemIdentity()

    async def bios(self) -> BiosInfo:
        return BiosInfo()

    async def baseboard(self) -> BaseboardInfo:
        return BaseboardInfo()

    async def chassis(self) -> ChassisInfo:
        return ChassisInfo()

    # ------------------------------
    # SOFTWARE
    # ------------------------------
    async def os_info(self) -> OsInfo:
        return OsInfo(**self.os_defaults())

    async def uuid(self) -> UuidInfo:
        return UuidInfo()

    async def versions(self, apps: str | None = '*') -> VersionReport:
        if not self.shell_probes:
            return empty_report(apps)
        return await VersionProber(self.host, self.runner).collect(apps)

    async def shell(self) -> str:
        if not self.shell_probes:
            return ''
        return await self.probe_line('echo $SHELL')

    async def services(self, names: str | None = '*') -> list[ServiceInfo]:
        return []

    def time(self) -> TimeInfo:
        now = datetime.now().astimezone()
        try:
            uptime = round(_time.time() - psutil.boot_time(), 2)
        except (OSError, RuntimeError):
            uptime = 0.0
        return TimeInfo(
            current=int(now.timestamp() * 1000),
            uptime=uptime,
            timezone=now.strftime('GMT%z'),
            timezone_name=now.tzname() or '',
        )

    # ------------------------------
    # HELPERS
    # ------------------------------
    def os_defaults(self) -> dict:
        return {
            'platform': self.host.platform.value,
            'kernel': self.host.kernel,
            'arch': self.host.arch,
            'hostname': self.host.hostname,
            'fqdn': self.host.hostname,
        }

    async def probe_line(self, command: str) -> str:
        result = await self.runner.run(command)
        return first_line(result.stdout).strip()

    def fqdn(self) -> str:
        result = self.runner.run_sync('hostname -f')
        line = first_line(result.stdout).strip()
        return line or self.host.hostname

    def codepage(self) -> str:
        """'en_US.UTF-8' -> 'UTF-8'"""
        result = self.runner.run_sync('echo $LANG')
        lang = result.stdout.strip()
        return lang.split('.')[1] if '.' in lang else ''

    @staticmethod
    def fill(model: type[Record], found: dict) -> Record:
        """Builds `model` from probe output; empty values keep the field default."""
        record = defaults_of(model)
        record.update({k: v for k, v in found.items() if v not in ('', None)})
        return model(**record)

    @staticmethod
    def ioreg_lines(stdout: str) -> list[str]:
        """ioreg quotes keys and wraps values in <...>; strip both."""
        return stdout.translate(str.maketrans('', '', '<>"')).splitlines()

    @staticmethod
    def values(lines: list[str], keys: dict[str, str], delimiter: str = ':', case_insensitive: bool = False) -> dict:
        return {field: get_value(lines, label, delimiter, case_insensitive) for field, label in keys.items()}
