# collectors/sunos.py
from __future__ import annotations

from collectors.base import BaseOSCollector
from collectors.release import logo_file
from models.hardware import BiosInfo
from models.osinfo import OsInfo


class SunOSCollector(BaseOSCollector):
    """Solaris / illumos. Only the BIOS vendor and the OS name are known."""

    shell_probes = True

    async def bios(self) -> BiosInfo:
        return BiosInfo(vendor='Sun Microsystems')

    async def os_info(self) -> OsInfo:
        distro = await self.probe_line('uname -o')
        record = self.os_defaults()
        record.update(
            distro=distro or 'unknown',
            release=self.host.kernel or 'unknown',
            logofile=logo_file(distro, self.host.platform),
        )
        return OsInfo(**record)
