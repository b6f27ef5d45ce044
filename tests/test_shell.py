from __future__ import annotations

import asyncio
import sys

import pytest

from collectors.windows import WindowsCollector
from errors import UnsupportedOperation
from helper.callbacks import run_blocking
from helper.callbacks import with_callback
from helper.shell import ProbeResult
from helper.shell import ProbeRunner

posix_only = pytest.mark.skipif(sys.platform.startswith('win'), reason='uses a POSIX shell')


def test_probe_result_lines_any_newline():
    assert ProbeResult('a\r\nb\nc').lines() == ['a', 'b', 'c']
    assert ProbeResult.failure() == ProbeResult('', True)


@posix_only
def test_run_sync_success():
    result = ProbeRunner().run_sync('echo hello')
    assert result.failed is False
    assert result.stdout.strip() == 'hello'


@posix_only
def test_run_sync_nonzero_exit_is_failure():
    assert ProbeRunner().run_sync('echo partial; exit 3') == ProbeResult('', True)


@posix_only
def test_run_missing_binary_is_failure():
    result = asyncio.run(ProbeRunner().run('definitely-not-a-real-binary-xyz'))
    assert result.failed is True
    assert result.stdout == ''


@posix_only
def test_run_timeout_is_failure():
    result = asyncio.run(ProbeRunner(timeout=0.2).run('sleep 5'))
    assert result == ProbeResult('', True)


@posix_only
def test_run_callback_receives_output():
    seen = []

    async def main():
        task = ProbeRunner().run_callback('echo cb', lambda out, failed: seen.append((out.strip(), failed)))
        await task

    asyncio.run(main())
    assert seen == [('cb', False)]


def test_read_text_missing_file_is_empty(tmp_path):
    runner = ProbeRunner()
    assert runner.read_text(str(tmp_path / 'nope')) == ''
    assert runner.exists(str(tmp_path)) is True
    assert runner.list_dir(str(tmp_path / 'nope')) == []


def test_read_text_and_list_dir(tmp_path):
    (tmp_path / 'b').write_text('beta\n')
    (tmp_path / 'a').write_text('alpha\n')
    runner = ProbeRunner()
    assert runner.read_text(str(tmp_path / 'a')) == 'alpha\n'
    assert runner.list_dir(str(tmp_path)) == ['a', 'b']


def test_with_callback_and_run_blocking():
    seen = []

    async def answer():
        return 42

    async def main():
        return await with_callback(answer(), seen.append)

    assert asyncio.run(main()) == 42
    assert seen == [42]
    assert run_blocking(answer()) == 42


def test_with_callback_reports_unsupported_shell(windows_host, fake_runner):
    seen = []
    collector = WindowsCollector(windows_host, fake_runner())

    async def main():
        with pytest.raises(UnsupportedOperation):
            await with_callback(collector.shell(), seen.append)
        # done callbacks run on the next loop iteration
        await asyncio.sleep(0)

    asyncio.run(main())
    assert len(seen) == 1
    assert isinstance(seen[0], UnsupportedOperation)
    assert seen[0].hint == 'shell is not available on windows'
