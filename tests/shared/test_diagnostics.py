"""Tests for shared.diagnostics helpers."""

import logging
import threading
from types import SimpleNamespace

import shared.diagnostics as diagnostics
from shared.constants import RENDER_THREAD_NAME


def test_get_memory_info_direct():
    info = diagnostics.get_memory_info()
    assert 'process_rss_mb' in info


def test_get_thread_info_direct():
    info = diagnostics.get_thread_info()
    assert 'active_count' in info
    assert 'renderer_alive' in info


def test_get_thread_info_sees_renderer():
    stop = threading.Event()
    th = threading.Thread(target=stop.wait, name=RENDER_THREAD_NAME, daemon=True)
    th.start()
    try:
        assert diagnostics.get_thread_info()['renderer_alive'] is True
    finally:
        stop.set()
        th.join()


def test_get_system_load_direct():
    info = diagnostics.get_system_load()
    assert 'cpu_percent' in info


def test_log_memory_usage_direct(caplog):
    with caplog.at_level(logging.INFO):
        diagnostics.log_memory_usage('test context')
    assert 'Memory usage' in caplog.text


def test_log_thread_status_direct(caplog):
    with caplog.at_level(logging.INFO):
        diagnostics.log_thread_status('test context')
    assert 'Thread status' in caplog.text


def test_log_comprehensive_diagnostics_direct(caplog):
    with caplog.at_level(logging.INFO):
        diagnostics.log_comprehensive_diagnostics('TEST OP')
    assert 'DIAGNOSTIC INFO: TEST OP' in caplog.text.upper()
    assert 'Map -' not in caplog.text


def test_log_comprehensive_diagnostics_with_map_status(caplog):
    with caplog.at_level(logging.INFO):
        diagnostics.log_comprehensive_diagnostics(
            'stop',
            {'tiles': 12, 'stale': 3, 'recent_updates': 5},
        )
    assert 'Map - Tiles: 12, Stale: 3, Recent updates: 5' in caplog.text


def test_get_memory_info_with_psutil(monkeypatch):
    """Memory figures are converted to MB."""
    class DummyProcess:
        pid = 123

        def memory_info(self):
            return SimpleNamespace(rss=1024 * 1024, vms=2 * 1024 * 1024)

        def memory_percent(self):
            return 12.5

    dummy_psutil = SimpleNamespace(
        Process=lambda: DummyProcess(),
        virtual_memory=lambda: SimpleNamespace(
            total=10 * 1024 * 1024,
            available=4 * 1024 * 1024,
            percent=60,
        ),
    )

    monkeypatch.setattr(diagnostics, 'psutil', dummy_psutil)

    info = diagnostics.get_memory_info()

    assert info['process_rss_mb'] == 1.0
    assert info['process_vms_mb'] == 2.0
    assert info['system_total_mb'] == 10.0
    assert info['process_memory_percent'] == 12.5


def test_get_memory_info_error(monkeypatch):
    def boom():
        raise RuntimeError('no access')

    monkeypatch.setattr(diagnostics, 'psutil', SimpleNamespace(Process=boom))
    assert 'Failed to get memory info' in diagnostics.get_memory_info()['error']


def test_get_system_load_with_psutil(monkeypatch):
    dummy_psutil = SimpleNamespace(
        Process=lambda: SimpleNamespace(cpu_percent=lambda interval: 7.5),
        cpu_percent=lambda interval: 40.0,
        cpu_count=lambda: 8,
    )
    monkeypatch.setattr(diagnostics, 'psutil', dummy_psutil)

    info = diagnostics.get_system_load()

    assert info['process_cpu_percent'] == 7.5
    assert info['cpu_percent'] == 40.0
    assert info['cpu_count'] == 8


def test_get_system_load_error(monkeypatch):
    def boom():
        raise RuntimeError('no access')

    monkeypatch.setattr(diagnostics, 'psutil', SimpleNamespace(Process=boom))
    assert 'Failed to get system load' in diagnostics.get_system_load()['error']
