# collectors/linux.py
from __future__ import annotations

import json
import logging

from collectors.dmi import DmiCollector
from collectors.release import describe_release
from collectors.release import logo_file
from collectors.release import parse_os_release
from collectors.services import collect_services
from models.osinfo import OsInfo
from models.osinfo import UuidInfo
from models.services import ServiceInfo

logger = logging.getLogger(__name__)

RELEASE_FILES = 'cat /etc/*-release; cat /usr/lib/os-release; cat /etc/openwrt_release 2>/dev/null || :'
MACHINE_ID = '( cat /var/lib/dbus/machine-id /etc/machine-id 2> /dev/null || hostname ) | head -n 1 || :'
LIST_UNITS = 'systemctl list-units --type=service --all --no-pager --output=json'
LIST_UNIT_FILES = 'systemctl list-unit-files --type=service --no-pager --output=json'


class LinuxCollector(DmiCollector):
    """
    Collector implementation for Linux systems.

    Mechanisms:
    - Hardware: dmidecode, then /sys/devices/virtual/dmi/id (see DmiCollector).
    - OS: /etc/*-release files, /sys/firmware/efi for UEFI.
    - Services: systemctl in JSON format, process stats from psutil.
    """

    # ------------------------------
    # OS
    # ------------------------------
    async def os_info(self) -> OsInfo:
        result = await self.runner.run(RELEASE_FILES)
        described = describe_release(parse_os_release(result.lines()))
        uuid = await self.uuid()

        record = self.os_defaults()
        record.update(described)
        record.update(
            fqdn=self.fqdn(),
            logofile=logo_file(described['distro'], self.host.platform),
            codepage=self.codepage(),
            serial=uuid.os,
            uefi=self.runner.exists('/sys/firmware/efi'),
        )
        return OsInfo(**record)

    async def uuid(self) -> UuidInfo:
        return UuidInfo(os=(await self.probe_line(MACHINE_ID)).lower())

    # ------------------------------
    # SERVICES (systemd)
    # ------------------------------
    async def _systemctl_json(self, command: str) -> list[dict]:
        result = await self.runner.run(command)
        if result.failed:
            return []
        try:
            entries = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug(f"Unreadable systemctl output for: {command}")
            return []
        return entries if isinstance(entries, list) else []

    async def service_names(self) -> list[str]:
        names = [ServiceInfo.unit_name(entry) for entry in await self._systemctl_json(LIST_UNITS)]
        return [n for n in names if n]

    async def service_startmodes(self, names: list[str]) -> dict[str, str]:
        """unit file state ('enabled', 'disabled', 'static', ...) keyed by service name"""
        modes = {}
        for entry in await self._systemctl_json(LIST_UNIT_FILES):
            name = ServiceInfo.unit_name({'unit': entry.get('unit_file', '')})
            if name in names:
                modes[name] = entry.get('state', '')
        return modes

    async def services(self, names: str | None = '*') -> list[ServiceInfo]:
        return await collect_services(names, self.service_names, self.service_startmodes)
