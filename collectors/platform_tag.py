# collectors/platform_tag.py
from __future__ import annotations

import platform
import socket
import sys
from dataclasses import dataclass
from enum import Enum


class PlatformTag(str, Enum):
    LINUX = 'linux'
    DARWIN = 'darwin'
    WINDOWS = 'windows'
    FREEBSD = 'freebsd'
    OPENBSD = 'openbsd'
    NETBSD = 'netbsd'
    SUNOS = 'sunos'
    OTHER = 'other'

    @property
    def is_bsd(self) -> bool:
        return self in (PlatformTag.FREEBSD, PlatformTag.OPENBSD, PlatformTag.NETBSD)


# sys.platform prefixes -> tag
_PREFIXES = [
    ('linux', PlatformTag.LINUX),
    ('darwin', PlatformTag.DARWIN),
    ('win32', PlatformTag.WINDOWS),
    ('cygwin', PlatformTag.WINDOWS),
    ('freebsd', PlatformTag.FREEBSD),
    ('openbsd', PlatformTag.OPENBSD),
    ('netbsd', PlatformTag.NETBSD),
    ('sunos', PlatformTag.SUNOS),
    ('solaris', PlatformTag.SUNOS),
    ('windows', PlatformTag.WINDOWS),
]

_ARCH = {
    'x86_64': 'x64',
    'amd64': 'x64',
    'i386': 'ia32',
    'i686': 'ia32',
    'x86': 'ia32',
    'aarch64': 'arm64',
    'arm64': 'arm64',
}


def detect(system: str | None = None) -> PlatformTag:
    """
    Maps the interpreter's platform string to a PlatformTag.
    Unknown platforms map to OTHER; there is no error path.
    """
    name = (system if system is not None else sys.platform).lower()
    for prefix, tag in _PREFIXES:
        if name.startswith(prefix):
            return tag
    return PlatformTag.OTHER


def normalize_arch(machine: str) -> str:
    machine = (machine or '').lower()
    if machine in _ARCH:
        return _ARCH[machine]
    if machine.startswith('arm'):
        return 'arm'
    return machine


@dataclass(frozen=True)
class HostIdentity:
    """
    Immutable description of the running host, computed once at startup and
    passed to every collector. Tests build simulated hosts directly.
    """
    platform: PlatformTag
    arch: str = ''
    kernel: str = ''
    hostname: str = ''

    @classmethod
    def current(cls) -> HostIdentity:
        return cls(
            platform=detect(),
            arch=normalize_arch(platform.machine()),
            kernel=platform.release(),
            hostname=socket.gethostname(),
        )
