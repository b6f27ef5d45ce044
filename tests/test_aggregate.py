from __future__ import annotations

import asyncio

import pytest

import aggregate
from aggregate import get_dynamic_data
from aggregate import get_static_data
from collectors.generic import GenericCollector
from collectors.linux import LinuxCollector
from collectors.platform_tag import HostIdentity
from collectors.platform_tag import PlatformTag
from models.unified import LoadSnapshot
from models.unified import MemorySnapshot
from os_env import APP_VERSION


def test_static_data_shape(fake_runner):
    runner = fake_runner()
    data = asyncio.run(get_static_data(GenericCollector(HostIdentity(PlatformTag.OTHER), runner)))
    payload = data.to_json()

    assert list(payload) == ['version', 'system', 'bios', 'baseboard', 'chassis', 'os', 'uuid', 'versions']
    assert payload['version'] == APP_VERSION
    assert payload['system']['model'] == 'Computer'
    assert payload['bios']['releaseDate'] == ''
    assert payload['baseboard']['assetTag'] == '-'
    assert payload['uuid'] == {'os': ''}
    assert len(payload['versions']) == 31
    assert runner.calls == []


def test_static_data_runs_every_collector(linux_host, fake_runner):
    runner = fake_runner({'echo $LANG': 'C.UTF-8\n', 'git --version': 'git version 2.34.1\n'})
    data = asyncio.run(get_static_data(LinuxCollector(linux_host, runner)))

    assert data.os.codepage == 'UTF-8'
    assert data.versions['git'] == '2.34.1'
    assert data.versions['kernel'] == linux_host.kernel


@pytest.fixture
def fixed_snapshots(monkeypatch):
    monkeypatch.setattr(aggregate, 'load_snapshot', lambda: LoadSnapshot(current_load=12.5, cpus=[10.0, 15.0]))
    monkeypatch.setattr(aggregate, 'memory_snapshot', lambda: MemorySnapshot(total=100, free=40, used=60, active=50, available=45))


def test_dynamic_data(fixed_snapshots, fake_runner):
    collector = GenericCollector(HostIdentity(PlatformTag.OTHER), fake_runner())
    payload = asyncio.run(get_dynamic_data(collector, '')).to_json()

    assert payload['currentLoad'] == {'currentLoad': 12.5, 'cpus': [10.0, 15.0]}
    assert payload['mem']['total'] == 100
    assert payload['services'] == []
    assert payload['time']['current'] > 0
    assert set(payload['time']) == {'current', 'uptime', 'timezone', 'timezoneName'}


def test_real_snapshots():
    load = aggregate.load_snapshot()
    mem = aggregate.memory_snapshot()
    assert load.current_load >= 0
    assert mem.total > 0
    assert mem.available <= mem.total
