# collectors/bsd.py
from __future__ import annotations

from collectors.dmi import DmiCollector
from collectors.release import logo_file
from helper.parsing import get_value
from models.osinfo import OsInfo
from models.osinfo import UuidInfo

SYSCTL_OS = 'sysctl kern.ostype kern.osrelease kern.osrevision kern.hostuuid machdep.bootmethod'


class BsdCollector(DmiCollector):
    """
    FreeBSD, OpenBSD and NetBSD. Hardware goes through dmidecode like Linux;
    the sysfs fallbacks simply read nothing here.
    """

    async def os_info(self) -> OsInfo:
        record = self.os_defaults()
        record['fqdn'] = self.fqdn()

        result = await self.runner.run(SYSCTL_OS)
        if not result.failed:
            lines = result.lines()
            distro = get_value(lines, 'kern.ostype')
            record.update(
                distro=distro or 'unknown',
                release=get_value(lines, 'kern.osrelease').split('-')[0] or 'unknown',
                serial=get_value(lines, 'kern.hostuuid'),
                logofile=logo_file(distro, self.host.platform),
                codepage=self.codepage(),
                uefi='uefi' in get_value(lines, 'machdep.bootmethod').lower(),
            )

        return OsInfo(**record)

    async def uuid(self) -> UuidInfo:
        return UuidInfo(os=(await self.probe_line('kenv -q smbios.system.uuid')).lower())
