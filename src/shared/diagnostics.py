"""
Diagnostic utilities.

This module reports process resources and the state of the render thread
so that a stuck or starved renderer can be spotted in the log.
"""

import logging
import os
import threading
from typing import Any

import psutil

from shared.constants import RENDER_THREAD_NAME

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def get_memory_info() -> dict[str, Any]:
    """Process and system memory in MB."""
    try:
        process = psutil.Process()
        memory = process.memory_info()
        system_memory = psutil.virtual_memory()
    except Exception as e:
        return {'error': f'Failed to get memory info: {e}'}
    return {
        'process_rss_mb': round(memory.rss / _MB, 2),
        'process_vms_mb': round(memory.vms / _MB, 2),
        'system_total_mb': round(system_memory.total / _MB, 2),
        'system_available_mb': round(system_memory.available / _MB, 2),
        'system_used_percent': system_memory.percent,
        'process_memory_percent': round(process.memory_percent(), 2),
    }


def get_thread_info() -> dict[str, Any]:
    """Get information about active threads."""
    try:
        thread_names = [t.name for t in threading.enumerate()]

        info = {
            'active_count': threading.active_count(),
            'thread_names': thread_names,
            'main_thread_alive': threading.main_thread().is_alive(),
            'renderer_alive': RENDER_THREAD_NAME in thread_names,
        }

        try:
            info['system_threads'] = psutil.Process().num_threads()
        except Exception as e:
            logger.debug('Failed to get system thread count: %s', e)
    except Exception as e:
        return {'error': f'Failed to get thread info: {e}'}
    else:
        return info


def get_system_load() -> dict[str, Any]:
    """CPU usage of the process and the host, plus the 1-minute load average."""
    try:
        info = {
            'process_cpu_percent': psutil.Process().cpu_percent(interval=0.1),
            'cpu_percent': psutil.cpu_percent(interval=None),
            'cpu_count': psutil.cpu_count(),
        }
    except Exception as e:
        return {'error': f'Failed to get system load: {e}'}
    if hasattr(os, 'getloadavg'):
        info['load_avg_1min'] = os.getloadavg()[0]
    return info


def log_comprehensive_diagnostics(
    operation: str = 'general',
    map_status: dict[str, Any] | None = None,
    level: int = logging.INFO,
) -> None:
    """Log comprehensive diagnostic information.

    Args:
        operation: Label of the lifecycle point being logged.
        map_status: Optional scheduler counters (see MapManager.status()).
        level: Logging level to use.
    """
    logger.log(level, '=== DIAGNOSTIC INFO: %s ===', operation.upper())

    memory_info = get_memory_info()
    logger.log(
        level,
        'Memory - RSS: %sMB, VMS: %sMB, System Available: %sMB (%s%% used)',
        memory_info.get('process_rss_mb', 'N/A'),
        memory_info.get('process_vms_mb', 'N/A'),
        memory_info.get('system_available_mb', 'N/A'),
        memory_info.get('system_used_percent', 'N/A'),
    )

    thread_info = get_thread_info()
    logger.log(
        level,
        'Threads - Active: %s, System: %s, Renderer alive: %s',
        thread_info.get('active_count', 'N/A'),
        thread_info.get('system_threads', 'N/A'),
        thread_info.get('renderer_alive', 'N/A'),
    )

    load_info = get_system_load()
    logger.log(
        level,
        'System - CPU: %s%% (process %s%%), Load avg: %s',
        load_info.get('cpu_percent', 'N/A'),
        load_info.get('process_cpu_percent', 'N/A'),
        load_info.get('load_avg_1min', 'N/A'),
    )

    if map_status:
        logger.log(
            level,
            'Map - Tiles: %s, Stale: %s, Recent updates: %s',
            map_status.get('tiles', 'N/A'),
            map_status.get('stale', 'N/A'),
            map_status.get('recent_updates', 'N/A'),
        )

    logger.log(level, '=== END DIAGNOSTIC INFO: %s ===', operation.upper())


def log_memory_usage(context: str = '') -> None:
    """Quick memory usage logging."""
    memory_info = get_memory_info()
    context_label = f' ({context})' if context else ''
    logger.info(
        'Memory usage%s: RSS=%sMB, Available=%sMB',
        context_label,
        memory_info.get('process_rss_mb', 'N/A'),
        memory_info.get('system_available_mb', 'N/A'),
    )


def log_thread_status(context: str = '') -> None:
    """Quick thread status logging."""
    thread_info = get_thread_info()
    context_label = f' ({context})' if context else ''
    logger.info(
        'Thread status%s: Active=%s, System=%s, Renderer=%s',
        context_label,
        thread_info.get('active_count', 'N/A'),
        thread_info.get('system_threads', 'N/A'),
        thread_info.get('renderer_alive', 'N/A'),
    )
