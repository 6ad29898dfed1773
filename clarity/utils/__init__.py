"""Utility functions."""

from .config import get_default_config, load_config
from .datetime_utils import format_clock_time, parse_clock_input
from .snapshot import load_snapshot

__all__ = ['format_clock_time', 'get_default_config', 'load_config', 'load_snapshot', 'parse_clock_input']
