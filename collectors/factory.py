# collectors/factory.py
from __future__ import annotations

from collectors.base import BaseOSCollector
from collectors.bsd import BsdCollector
from collectors.generic import GenericCollector
from collectors.linux import LinuxCollector
from collectors.mac import MacCollector
from collectors.platform_tag import HostIdentity
from collectors.platform_tag import PlatformTag
from collectors.sunos import SunOSCollector
from collectors.windows import WindowsCollector
from helper.shell import ProbeRunner


collectors = {
    PlatformTag.WINDOWS: WindowsCollector,
    PlatformTag.LINUX: LinuxCollector,
    PlatformTag.DARWIN: MacCollector,
    PlatformTag.FREEBSD: BsdCollector,
    PlatformTag.OPENBSD: BsdCollector,
    PlatformTag.NETBSD: BsdCollector,
    PlatformTag.SUNOS: SunOSCollector,
}


def get_collector(host: HostIdentity | None = None, runner: ProbeRunner | None = None) -> BaseOSCollector:
    """
    Factory function that returns the collector matching the host platform.

    The host identity is detected once here when not supplied and then handed
    to the collector, so server.py never needs to know which OS it runs on.

    Args:
        host (HostIdentity): Simulated or detected host. Defaults to the running machine.
        runner (ProbeRunner): Probe runner to inject (tests pass a scripted fake).

    Returns:
        BaseOSCollector: The platform collector, or GenericCollector for
                         platforms without one. Unknown platforms never raise.
    """
    host = host or HostIdentity.current()
    collector_cls = collectors.get(host.platform, GenericCollector)
    return collector_cls(host, runner)
