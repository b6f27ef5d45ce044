# collectors/versions.py
from __future__ import annotations

import asyncio
import logging
import re
import ssl
from collections.abc import Awaitable
from collections.abc import Callable

from collectors.platform_tag import HostIdentity
from collectors.platform_tag import PlatformTag
from helper.parsing import first_line
from helper.parsing import get_value
from helper.shell import ProbeRunner
from models.osinfo import Tool
from models.osinfo import VersionReport

logger = logging.getLogger(__name__)

OPENSSL_GROUP = (Tool.OPENSSL, Tool.SYSTEM_OPENSSL, Tool.SYSTEM_OPENSSL_LIB)

XCODE_PATHS = [
    '/Library/Developer/CommandLineTools/usr/bin/',
    '/Applications/Xcode.app/Contents/Developer/Tools',
    '/Library/Developer/Xcode/',
]
HOMEBREW_CELLARS = ['/usr/local/Cellar', '/opt/homebrew/Cellar']

# node based CLIs ship as .cmd shims on windows
WINDOWS_CMD_SHIMS = {Tool.PM2, Tool.GULP, Tool.GRUNT, Tool.TSC}


def parse_selector(apps: str | None) -> tuple[list[Tool], list[str]]:
    """
    Resolves a version request into known tools.

    '*' (or nothing) selects every tool. Otherwise names are split on commas,
    pipes or whitespace and matched case-insensitively. Requesting openssl also
    brings in the system OpenSSL fields. Unknown names come back in the second
    list and never reach the report.
    """
    names = [n for n in re.split(r'[,\s|]+', (apps or '').strip().lower()) if n]
    if not names or '*' in names:
        return list(Tool), []

    lookup = {tool.value.lower(): tool for tool in Tool}
    tools: list[Tool] = []
    rejected: list[str] = []

    for name in names:
        tool = lookup.get(name)
        if tool is None:
            rejected.append(name)
            continue
        for t in (OPENSSL_GROUP if tool is Tool.OPENSSL else (tool,)):
            if t not in tools:
                tools.append(t)

    return tools, rejected


def empty_report(apps: str | None = '*') -> VersionReport:
    tools, _ = parse_selector(apps)
    return VersionReport({tool: '' for tool in tools})


def _after(text: str, keyword: str) -> str:
    """'CLI version: 2.3.0' after 'version' -> '2.3.0'"""
    parts = text.lower().split(keyword, 1)
    if len(parts) < 2:
        return ''
    return parts[1].strip(' :\t')


class VersionProber:
    """
    Detects installed tool versions.

    Every requested tool gets its own non-blocking probe; all of them are
    joined once with asyncio.gather, so the report resolves exactly once,
    after the slowest probe finished.
    """

    def __init__(self, host: HostIdentity, runner: ProbeRunner):
        self.host = host
        self.runner = runner

    @property
    def darwin(self) -> bool:
        return self.host.platform is PlatformTag.DARWIN

    @property
    def windows(self) -> bool:
        return self.host.platform is PlatformTag.WINDOWS

    async def collect(self, apps: str | None = '*') -> VersionReport:
        tools, rejected = parse_selector(apps)
        if rejected:
            logger.debug(f"Ignoring unknown tools: {', '.join(rejected)}")

        report: dict[Tool, str] = {tool: '' for tool in tools}

        probes: list[Callable[[], Awaitable[dict[Tool, str]]]] = []
        for tool in tools:
            probe = self._probe_for(tool)
            if probe not in probes:
                probes.append(probe)

        for found in await asyncio.gather(*(p() for p in probes)):
            for tool, version in found.items():
                if tool in report:
                    report[tool] = version or ''

        return VersionReport(report)

    def _probe_for(self, tool: Tool) -> Callable[[], Awaitable[dict[Tool, str]]]:
        if tool in OPENSSL_GROUP:
            return self.openssl
        return getattr(self, tool.value)

    # ------------------------------
    # HELPERS
    # ------------------------------
    async def _line(self, command: str) -> str | None:
        """First line of a probe, or None when the probe failed."""
        result = await self.runner.run(command)
        if result.failed:
            return None
        return first_line(result.stdout).strip()

    def _cmd(self, tool: Tool, name: str) -> str:
        return f"{name}.cmd" if self.windows and tool in WINDOWS_CMD_SHIMS else name

    def xcode_exists(self) -> bool:
        return any(self.runner.exists(p) for p in XCODE_PATHS)

    def homebrew_has(self, formula: str) -> bool:
        return any(self.runner.exists(f"{cellar}/{formula}") for cellar in HOMEBREW_CELLARS)

    def darwin_allows(self, formula: str) -> bool:
        """
        On macOS, calling git/python/pip without the command line tools pops up
        an install dialog. Only probe when a real copy is known to exist.
        """
        if not self.darwin:
            return True
        return self.xcode_exists() or self.homebrew_has(formula)

    # ------------------------------
    # PROBES
    # ------------------------------
    async def kernel(self) -> dict[Tool, str]:
        return {Tool.KERNEL: self.host.kernel}

    async def openssl(self) -> dict[Tool, str]:
        runtime = ssl.OPENSSL_VERSION.split()
        found = {Tool.OPENSSL: runtime[1] if len(runtime) > 1 else ''}
        line = await self._line('openssl version')
        if line:
            parts = line.split(' ')
            found[Tool.SYSTEM_OPENSSL] = parts[1] if len(parts) > 1 else parts[0]
            found[Tool.SYSTEM_OPENSSL_LIB] = parts[0] if len(parts) > 1 else 'openssl'
        return found

    async def node(self) -> dict[Tool, str]:
        line = await self._line('node -v')
        return {Tool.NODE: line.lstrip('v') if line else ''}

    async def v8(self) -> dict[Tool, str]:
        return {Tool.V8: await self._line('node -p process.versions.v8') or ''}

    async def npm(self) -> dict[Tool, str]:
        return {Tool.NPM: await self._line('npm -v') or ''}

    async def yarn(self) -> dict[Tool, str]:
        return {Tool.YARN: await self._line('yarn --version') or ''}

    async def pm2(self) -> dict[Tool, str]:
        line = await self._line(f"{self._cmd(Tool.PM2, 'pm2')} -v") or ''
        # a first run prints the daemon banner instead of a version
        return {Tool.PM2: '' if line.startswith('[PM2]') else line}

    async def gulp(self) -> dict[Tool, str]:
        line = await self._line(f"{self._cmd(Tool.GULP, 'gulp')} --version") or ''
        return {Tool.GULP: _after(line, 'version')}

    async def tsc(self) -> dict[Tool, str]:
        line = await self._line(f"{self._cmd(Tool.TSC, 'tsc')} --version") or ''
        return {Tool.TSC: _after(line, 'version')}

    async def grunt(self) -> dict[Tool, str]:
        line = await self._line(f"{self._cmd(Tool.GRUNT, 'grunt')} --version") or ''
        return {Tool.GRUNT: _after(line, 'cli v')}

    async def git(self) -> dict[Tool, str]:
        if not self.darwin_allows('git'):
            return {}
        line = await self._line('git --version') or ''
        version = _after(line, 'version').split(' ')[0]
        return {Tool.GIT: version.strip()}

    async def apache(self) -> dict[Tool, str]:
        # Server version: Apache/2.4.46 (Unix)
        line = await self._line('apachectl -v 2>&1') or ''
        parts = line.split(':', 1)
        if len(parts) < 2:
            return {}
        version = parts[1].replace('Apache', '').replace('/', '').strip()
        return {Tool.APACHE: version.split(' ')[0]}

    async def nginx(self) -> dict[Tool, str]:
        # nginx version: nginx/1.18.0 (Ubuntu)
        line = await self._line('nginx -v 2>&1') or ''
        return {Tool.NGINX: _after(line, '/').split(' ')[0]}

    async def mysql(self) -> dict[Tool, str]:
        line = (await self._line('mysql -V') or '').lower()
        if ',' in line:
            # mysql  Ver 14.14 Distrib 5.7.33, for Linux (x86_64)
            parts = line.split(',')[0].strip().split(' ')
            return {Tool.MYSQL: parts[-1].strip()}
        if ' ver ' in line:
            # mysql  Ver 8.0.23 for Linux on x86_64
            return {Tool.MYSQL: line.split(' ver ', 1)[1].split(' ')[0]}
        return {}

    async def php(self) -> dict[Tool, str]:
        # PHP 7.4.3-4ubuntu2.4 (cli) (built: ...)
        line = await self._line('php -v') or ''
        head = line.split('(')[0].split('-')[0]
        return {Tool.PHP: re.sub(r'[^0-9.]', '', head)}

    async def redis(self) -> dict[Tool, str]:
        # Redis server v=6.0.9 sha=00000000:0 malloc=jemalloc-5.1.0 bits=64
        line = await self._line('redis-server --version') or ''
        return {Tool.REDIS: get_value(line.split(' '), 'v', '=', True)}

    async def docker(self) -> dict[Tool, str]:
        # Docker version 20.10.2, build 2291f61
        parts = (await self._line('docker --version') or '').split(' ')
        version = parts[2][:-1] if len(parts) > 2 and parts[2].endswith(',') else ''
        return {Tool.DOCKER: version}

    async def postfix(self) -> dict[Tool, str]:
        result = await self.runner.run('postconf -d | grep mail_version')
        if result.failed:
            return {}
        return {Tool.POSTFIX: get_value(result.lines(), 'mail_version', '=', True)}

    async def mongodb(self) -> dict[Tool, str]:
        # db version v4.4.3
        line = (await self._line('mongod --version') or '').lower()
        return {Tool.MONGODB: re.sub(r'[^0-9.]', '', line.split(',')[0])}

    async def postgresql(self) -> dict[Tool, str]:
        if self.host.platform is PlatformTag.LINUX:
            located = await self.runner.run('locate bin/postgres')
            binaries = sorted(line for line in located.lines() if line.strip())
            if not located.failed and binaries:
                line = await self._line(f"{binaries[-1]} -V") or ''
                return {Tool.POSTGRESQL: line.split(' ')[-1] if line else ''}
            line = await self._line('psql -V') or ''
            return {Tool.POSTGRESQL: line.split(' ')[-1].split('-')[0] if line else ''}

        if self.windows:
            result = await self.runner.run(
                'powershell -NoProfile -NonInteractive -Command '
                '"Get-CimInstance -ClassName Win32_Service | Format-List Caption"',
            )
            for line in result.lines():
                caption = get_value([line], 'caption', ':', True).lower()
                if 'postgresql' in caption and ' server ' in caption:
                    return {Tool.POSTGRESQL: caption.split(' server ', 1)[1].strip()}
            return {}

        line = await self._line('postgres -V') or ''
        return {Tool.POSTGRESQL: line.split(' ')[-1] if line else ''}

    async def perl(self) -> dict[Tool, str]:
        # This is perl 5, version 30, subversion 0 (v5.30.0) built for ...
        result = await self.runner.run('perl -v')
        lines = [line for line in result.lines() if line.strip()]
        if result.failed or not lines:
            return {}
        return {Tool.PERL: lines[0].split('(')[-1].split(')')[0].replace('v', '')}

    async def _python(self, tool: Tool, binary: str) -> dict[Tool, str]:
        if not self.darwin_allows(binary):
            return {}
        line = await self._line(f"{binary} -V 2>&1") or ''
        return {tool: line.lower().replace('python', '').strip()}

    async def python(self) -> dict[Tool, str]:
        return await self._python(Tool.PYTHON, 'python')

    async def python3(self) -> dict[Tool, str]:
        return await self._python(Tool.PYTHON3, 'python3')

    async def _pip(self, tool: Tool, binary: str) -> dict[Tool, str]:
        # pip 20.0.2 from /usr/lib/python3/dist-packages/pip (python 3.8)
        if not self.darwin_allows(binary):
            return {}
        parts = (await self._line(f"{binary} -V 2>&1") or '').split(' ')
        return {tool: parts[1] if len(parts) >= 2 else ''}

    async def pip(self) -> dict[Tool, str]:
        return await self._pip(Tool.PIP, 'pip')

    async def pip3(self) -> dict[Tool, str]:
        return await self._pip(Tool.PIP3, 'pip3')

    async def java(self) -> dict[Tool, str]:
        if self.darwin:
            # without a JVM, calling `java` opens the "install Java" dialog
            home = await self.runner.run('/usr/libexec/java_home -V 2>&1')
            if home.failed or 'no java runtime' in home.stdout.lower():
                return {}
        # openjdk version "11.0.10" 2021-01-19
        parts = (await self._line('java -version 2>&1') or '').split('"')
        return {Tool.JAVA: parts[1].strip() if len(parts) == 3 else ''}

    async def gcc(self) -> dict[Tool, str]:
        if self.darwin and not self.xcode_exists():
            return {}
        version = await self._line('gcc -dumpversion') or ''
        if '.' in version:
            return {Tool.GCC: version}
        # gcc (Ubuntu 9.3.0-17ubuntu1~20.04) 9.3.0
        line = await self._line('gcc --version') or ''
        if 'gcc' in line and ')' in line:
            version = line.split(')')[1].strip() or version
        return {Tool.GCC: version}

    async def virtualbox(self) -> dict[Tool, str]:
        binary = '"%VBOX_INSTALL_PATH%\\VBoxManage.exe"' if self.windows else 'vboxmanage'
        # 6.1.16r140961
        line = await self._line(f"{binary} -v 2>&1") or ''
        return {Tool.VIRTUALBOX: line.split('r')[0]}

    async def dotnet(self) -> dict[Tool, str]:
        return {Tool.DOTNET: await self._line('dotnet --version 2>&1') or ''}
