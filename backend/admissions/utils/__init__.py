"""Utility modules"""
from .logger import get_logger, setup_logging, set_correlation_id, get_correlation_id, correlation_scope
from .idgen import generate_id, generate_correlation_id
from .time import utc_now, ensure_utc

__all__ = [
    "get_logger",
    "setup_logging",
    "set_correlation_id",
    "get_correlation_id",
    "correlation_scope",
    "generate_id",
    "generate_correlation_id",
    "utc_now",
    "ensure_utc",
]
