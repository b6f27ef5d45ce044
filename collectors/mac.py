# collectors/mac.py
from __future__ import annotations

from collectors.base import BaseOSCollector
from collectors.release import logo_file
from collectors.release import mac_codename
from collectors.services import collect_services
from helper.parsing import get_value
from models.hardware import BaseboardInfo
from models.hardware import BiosInfo
from models.hardware import ChassisInfo
from models.hardware import SystemIdentity
from models.osinfo import OsInfo
from models.osinfo import UuidInfo
from models.services import ServiceInfo

IOREG_PLATFORM = 'ioreg -c IOPlatformExpertDevice -d 2'
IOREG_UUID = 'ioreg -rd1 -c IOPlatformExpertDevice | grep IOPlatformUUID'
SW_VERS = 'sw_vers; sysctl kern.ostype kern.osrelease kern.osrevision kern.uuid'


class MacCollector(BaseOSCollector):
    """
    Collector implementation for macOS.

    Mechanisms:
    - Hardware: the IOPlatformExpertDevice node of `ioreg` ('key = <value>' lines).
    - OS: sw_vers and sysctl.
    - Services: `launchctl list` (no JSON output, columns are PID, Status, Label).
    """

    shell_probes = True

    async def platform_expert(self) -> list[str]:
        result = await self.runner.run(IOREG_PLATFORM)
        return [] if result.failed else self.ioreg_lines(result.stdout)

    # ------------------------------
    # HARDWARE
    # ------------------------------
    async def system(self) -> SystemIdentity:
        lines = await self.platform_expert()
        found = self.values(lines, {
            'manufacturer': 'manufacturer',
            'model': 'model',
            'version': 'version',
            'serial': 'ioplatformserialnumber',
            'uuid': 'ioplatformuuid',
            'sku': 'board-id',
        }, '=', True)
        found['uuid'] = found['uuid'].lower()
        return self.fill(SystemIdentity, found)

    async def bios(self) -> BiosInfo:
        return BiosInfo(vendor='Apple Inc.')

    async def baseboard(self) -> BaseboardInfo:
        lines = await self.platform_expert()
        return self.fill(BaseboardInfo, self.values(lines, {
            'manufacturer': 'manufacturer',
            'model': 'model',
            'version': 'version',
            'serial': 'ioplatformserialnumber',
            'asset_tag': 'board-id',
        }, '=', True))

    async def chassis(self) -> ChassisInfo:
        lines = await self.platform_expert()
        return self.fill(ChassisInfo, self.values(lines, {
            'manufacturer': 'manufacturer',
            'model': 'model',
            'version': 'version',
            'serial': 'ioplatformserialnumber',
            'asset_tag': 'board-id',
        }, '=', True))

    # ------------------------------
    # OS
    # ------------------------------
    async def os_info(self) -> OsInfo:
        record = self.os_defaults()
        record.update(fqdn=self.fqdn(), codepage=self.codepage(), uefi=True)

        result = await self.runner.run(SW_VERS)
        lines = result.lines()
        distro = get_value(lines, 'ProductName')
        release = get_value(lines, 'ProductVersion')

        record.update(
            distro=distro or 'unknown',
            release=release or 'unknown',
            build=get_value(lines, 'BuildVersion'),
            serial=get_value(lines, 'kern.uuid'),
            codename=mac_codename(release),
            logofile=logo_file(distro, self.host.platform),
        )
        return OsInfo(**record)

    async def uuid(self) -> UuidInfo:
        # "IOPlatformUUID" = "D4A2B3C1-..."
        line = (await self.probe_line(IOREG_UUID)).replace('"', '')
        parts = line.split('=')
        return UuidInfo(os=parts[1].strip().lower() if len(parts) > 1 else '')

    # ------------------------------
    # SERVICES (launchd)
    # ------------------------------
    async def service_names(self) -> list[str]:
        result = await self.runner.run('launchctl list')
        labels = [ServiceInfo.launchd_label(line) for line in result.lines()]
        return [label for label in labels if label]

    async def services(self, names: str | None = '*') -> list[ServiceInfo]:
        return await collect_services(names, self.service_names)
