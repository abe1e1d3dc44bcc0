"""Shared constants and diagnostics."""
from shared.diagnostics import (
    log_comprehensive_diagnostics,
    log_memory_usage,
    log_thread_status,
)

__all__ = [
    'log_comprehensive_diagnostics',
    'log_memory_usage',
    'log_thread_status',
]
