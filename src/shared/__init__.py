"""Shared utilities and helpers."""
from shared.diagnostics import (
    get_memory_info,
    log_memory_usage,
    log_thread_status,
)
from shared.progress import ConsoleProgress, SingleLineRenderer, set_progress_callback

__all__ = [
    'ConsoleProgress',
    'SingleLineRenderer',
    'get_memory_info',
    'log_memory_usage',
    'log_thread_status',
    'set_progress_callback',
]
