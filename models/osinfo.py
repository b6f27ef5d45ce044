from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict
from pydantic import Field
from pydantic import RootModel

from models.record import Record


class OsInfo(Record):
    platform: str = ''
    distro: str = 'unknown'
    release: str = 'unknown'
    codename: str = ''
    kernel: str = ''
    arch: str = ''
    hostname: str = ''
    fqdn: str = ''
    codepage: str = ''
    logofile: str = ''
    serial: str = ''
    build: str = ''
    servicepack: str = ''
    uefi: bool = False


class UuidInfo(Record):
    os: str = ''


class TimeInfo(Record):
    current: int = 0
    uptime: float = 0.0
    timezone: str = ''
    timezone_name: str = Field('', alias='timezoneName')


class Tool(str, Enum):
    """Every tool the version report knows how to probe."""
    KERNEL = 'kernel'
    OPENSSL = 'openssl'
    SYSTEM_OPENSSL = 'systemOpenssl'
    SYSTEM_OPENSSL_LIB = 'systemOpensslLib'
    NODE = 'node'
    V8 = 'v8'
    NPM = 'npm'
    YARN = 'yarn'
    PM2 = 'pm2'
    GULP = 'gulp'
    GRUNT = 'grunt'
    GIT = 'git'
    TSC = 'tsc'
    MYSQL = 'mysql'
    REDIS = 'redis'
    MONGODB = 'mongodb'
    APACHE = 'apache'
    NGINX = 'nginx'
    PHP = 'php'
    DOCKER = 'docker'
    POSTFIX = 'postfix'
    POSTGRESQL = 'postgresql'
    PERL = 'perl'
    PYTHON = 'python'
    PYTHON3 = 'python3'
    PIP = 'pip'
    PIP3 = 'pip3'
    JAVA = 'java'
    GCC = 'gcc'
    VIRTUALBOX = 'virtualbox'
    DOTNET = 'dotnet'


class VersionReport(RootModel[dict[Tool, str]]):
    """tool -> detected version ('' when absent). Only requested tools appear."""
    model_config = ConfigDict(frozen=True)

    def to_json(self) -> dict[str, str]:
        return {tool.value: version for tool, version in self.root.items()}

    def __getitem__(self, key: Tool | str) -> str:
        return self.root[Tool(key)]

    def keys(self) -> list[str]:
        return [tool.value for tool in self.root]
