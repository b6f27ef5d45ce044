# collectors/release.py
from __future__ import annotations

from collectors.platform_tag import PlatformTag
from helper.parsing import slugify

# first keyword contained in the distro name wins
LOGO_KEYWORDS = [
    ('mac os', 'apple'),
    ('macos', 'apple'),
    ('arch', 'arch'),
    ('centos', 'centos'),
    ('coreos', 'coreos'),
    ('debian', 'debian'),
    ('deepin', 'deepin'),
    ('elementary', 'elementary'),
    ('fedora', 'fedora'),
    ('gentoo', 'gentoo'),
    ('mageia', 'mageia'),
    ('mandriva', 'mandriva'),
    ('manjaro', 'manjaro'),
    ('mint', 'mint'),
    ('mx', 'mx'),
    ('openbsd', 'openbsd'),
    ('freebsd', 'freebsd'),
    ('opensuse', 'opensuse'),
    ('pclinuxos', 'pclinuxos'),
    ('puppy', 'puppy'),
    ('raspbian', 'raspbian'),
    ('reactos', 'reactos'),
    ('red hat', 'redhat'),
    ('redhat', 'redhat'),
    ('slackware', 'slackware'),
    ('sugar', 'sugar'),
    ('steam', 'steam'),
    ('suse', 'suse'),
    ('mate', 'ubuntu-mate'),
    ('lubuntu', 'lubuntu'),
    ('xubuntu', 'xubuntu'),
    ('ubuntu', 'ubuntu'),
    ('solaris', 'solaris'),
    ('tails', 'tails'),
    ('feren', 'ferenos'),
    ('robolinux', 'robolinux'),
]

MAC_CODENAMES = [
    ('10.4', 'Mac OS X Tiger'),
    ('10.5', 'Mac OS X Leopard'),
    ('10.6', 'Mac OS X Snow Leopard'),
    ('10.7', 'Mac OS X Lion'),
    ('10.8', 'OS X Mountain Lion'),
    ('10.9', 'OS X Mavericks'),
    ('10.10', 'OS X Yosemite'),
    ('10.11', 'OS X El Capitan'),
    ('10.12', 'macOS Sierra'),
    ('10.13', 'macOS High Sierra'),
    ('10.14', 'macOS Mojave'),
    ('10.15', 'macOS Catalina'),
    ('11', 'macOS Big Sur'),
    ('12', 'macOS Monterey'),
    ('13', 'macOS Ventura'),
    ('14', 'macOS Sonoma'),
    ('15', 'macOS Sequoia'),
]


def logo_file(distro: str, platform: PlatformTag) -> str:
    """
    Icon name for a distro: 'Ubuntu' -> 'ubuntu', 'Linux Mint' -> 'mint'.
    Unknown Linux distros fall back to their slug, other hosts to the platform tag.
    """
    if platform is PlatformTag.WINDOWS:
        return 'windows'

    distro = (distro or '').lower()
    for keyword, logo in LOGO_KEYWORDS:
        if keyword in distro:
            return logo

    if platform is PlatformTag.LINUX and distro:
        return slugify(distro)
    return platform.value


def mac_codename(release: str) -> str:
    """'10.15.7' -> 'macOS Catalina', '14.2' -> 'macOS Sonoma', unknown -> 'macOS'"""
    parts = (release or '').split('.')
    for version, name in MAC_CODENAMES:
        wanted = version.split('.')
        if parts[:len(wanted)] == wanted:
            return name
    return 'macOS'


def parse_os_release(lines: list[str]) -> dict[str, str]:
    """
    Merges /etc/*-release style KEY=value lines into one map.
    Keys are upper-cased, quotes removed, later duplicates overwrite earlier ones.
    """
    release: dict[str, str] = {}
    for line in lines:
        if '=' not in line:
            continue
        key, value = line.split('=', 1)
        release[key.strip().upper()] = value.strip().replace('"', '').replace("'", '')
    return release


def describe_release(release: dict[str, str]) -> dict[str, str]:
    """
    Picks distro, release, codename and build out of a parsed release map.

    'VERSION="20.04.6 LTS (Focal Fossa)"' yields release '20.04.6 LTS' and
    codename 'Focal Fossa'.
    """
    version = release.get('VERSION', '')
    codename = release.get('DISTRIB_CODENAME') or release.get('VERSION_CODENAME', '')

    if '(' in version:
        head, tail = version.split('(', 1)
        codename = tail.replace('(', '').replace(')', '').strip()
        version = head.strip()

    return {
        'distro': release.get('DISTRIB_ID') or release.get('NAME') or 'unknown',
        'release': version or release.get('DISTRIB_RELEASE') or release.get('VERSION_ID') or 'unknown',
        'codename': codename,
        'build': release.get('BUILD_ID', '').strip(),
    }
