"""
Utility Module for the extraction engine.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - Common helpers
"""

from .logger import setup_logger, setup_logger_from_config, get_logger
from .helpers import (
    ensure_directory,
    generate_timestamp,
    synthetic_reference,
    collapse_whitespace,
    first_group,
)

__all__ = [
    'setup_logger',
    'setup_logger_from_config',
    'get_logger',
    'ensure_directory',
    'generate_timestamp',
    'synthetic_reference',
    'collapse_whitespace',
    'first_group',
]
