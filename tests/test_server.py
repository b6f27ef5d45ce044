from __future__ import annotations

import asyncio
import json

import pytest
from fastmcp.client import Client
from fastmcp.client.transports import FastMCPTransport
from starlette.testclient import TestClient

import collectors.services as services_module
import server
from collectors.generic import GenericCollector
from collectors.linux import LinuxCollector
from collectors.platform_tag import HostIdentity
from collectors.platform_tag import PlatformTag
from collectors.windows import WindowsCollector
from os_env import APP_VERSION


@pytest.fixture
def generic(monkeypatch, fake_runner):
    runner = fake_runner()
    monkeypatch.setattr(server, 'collector', GenericCollector(HostIdentity(PlatformTag.OTHER), runner))
    monkeypatch.setattr(services_module, 'process_table', lambda: [
        {'pid': 7, 'name': 'nginx', 'cpu_percent': 1.0, 'memory_percent': 2.0},
    ])
    return runner


@pytest.fixture
def http():
    return TestClient(server.app.http_app())


def test_get_services_without_name(generic, http):
    resp = http.get('/api/getServices')
    assert resp.status_code == 200
    assert resp.json() == []


def test_get_services_by_name(monkeypatch, linux_host, fake_runner, http):
    monkeypatch.setattr(server, 'collector', LinuxCollector(linux_host, fake_runner()))
    monkeypatch.setattr(services_module, 'process_table', lambda: [
        {'pid': 7, 'name': 'nginx', 'cpu_percent': 1.0, 'memory_percent': 2.0},
    ])
    resp = http.get('/api/getServices', params={'name': 'nginx'})
    assert resp.json() == [
        {'name': 'nginx', 'running': True, 'startmode': '', 'pids': [7], 'pcpu': 1.0, 'pmem': 2.0},
    ]


def test_check_site_rejects_other_schemes(generic, http):
    resp = http.get('/api/checkSite', params={'url': 'ftp://example.com'})
    assert resp.status_code == 200
    assert resp.json() == {'url': 'ftp://example.com', 'ok': False, 'status': 404, 'ms': None}


def test_versions_subset(generic, http):
    resp = http.get('/api/versions', params={'apps': 'git, node, nothing'})
    assert resp.json() == {'git': '', 'node': ''}


def test_hardware_defaults(generic, http):
    assert http.get('/api/system').json()['model'] == 'Computer'
    assert http.get('/api/chassis').json()['assetTag'] == '-'
    assert http.get('/api/uuid').json() == {'os': ''}


def test_shell_is_501_on_windows(monkeypatch, windows_host, fake_runner, http):
    monkeypatch.setattr(server, 'collector', WindowsCollector(windows_host, fake_runner()))
    resp = http.get('/api/shell')
    assert resp.status_code == 501
    assert resp.json() == {'error': 'not supported', 'hint': 'shell is not available on windows'}


def test_static_data(generic, http):
    payload = http.get('/api/getStaticData').json()
    assert payload['version'] == APP_VERSION
    assert payload['os']['platform'] == 'other'
    assert generic.calls == []


def test_dynamic_data(generic, http):
    payload = http.get('/api/getDynamicData', params={'srv': 'nginx'}).json()
    assert payload['services'] == []
    assert payload['mem']['total'] > 0


async def call_tool(name: str, arguments: dict | None = None):
    async with Client(transport=FastMCPTransport(mcp=server.app)) as mcp:
        return await mcp.call_tool(name, arguments or {})


def test_ping_tool():
    res = asyncio.run(call_tool('get_testing_ping'))
    assert res.content[0].text == 'pong'


def test_tools_are_registered():
    async def names():
        async with Client(transport=FastMCPTransport(mcp=server.app)) as mcp:
            return {t.name for t in await mcp.list_tools()}

    assert {
        'get_services',
        'check_website',
        'get_hardware',
        'get_os_info',
        'get_versions',
        'get_shell',
        'get_static_inventory',
        'get_dynamic_inventory',
    } <= asyncio.run(names())


def test_shell_tool_reports_unsupported(monkeypatch, windows_host, fake_runner):
    monkeypatch.setattr(server, 'collector', WindowsCollector(windows_host, fake_runner()))
    res = asyncio.run(call_tool('get_shell'))
    assert json.loads(res.content[0].text) == {'error': 'not supported', 'hint': 'shell is not available on windows'}
