from __future__ import annotations

import pytest

from collectors.platform_tag import HostIdentity
from collectors.platform_tag import PlatformTag
from helper.shell import ProbeResult
from helper.shell import ProbeRunner


class FakeRunner(ProbeRunner):
    """
    Scripted probe runner.

    commands: exact command string -> stdout. Unknown commands fail.
    files:    path -> content, also answers exists().
    dirs:     path -> directory entries.
    Every command goes to `calls`, every file access to `reads`.
    """

    def __init__(self, commands=None, files=None, dirs=None):
        super().__init__(timeout=None)
        self.commands = dict(commands or {})
        self.files = dict(files or {})
        self.dirs = dict(dirs or {})
        self.calls = []
        self.reads = []

    def _answer(self, command):
        self.calls.append(command)
        if command not in self.commands:
            return ProbeResult.failure()
        return ProbeResult(self.commands[command], False)

    def run_sync(self, command):
        return self._answer(command)

    async def run(self, command):
        return self._answer(command)

    def exists(self, path):
        self.reads.append(path)
        return path in self.files or path in self.dirs

    def read_text(self, path):
        self.reads.append(path)
        return self.files.get(path, '')

    def list_dir(self, path):
        self.reads.append(path)
        return sorted(self.dirs.get(path, []))


@pytest.fixture
def fake_runner():
    return FakeRunner


@pytest.fixture
def linux_host():
    return HostIdentity(PlatformTag.LINUX, arch='x64', kernel='5.15.0-91-generic', hostname='box')


@pytest.fixture
def mac_host():
    return HostIdentity(PlatformTag.DARWIN, arch='arm64', kernel='23.2.0', hostname='mbp')


@pytest.fixture
def windows_host():
    return HostIdentity(PlatformTag.WINDOWS, arch='x64', kernel='10.0.19045', hostname='PC')
