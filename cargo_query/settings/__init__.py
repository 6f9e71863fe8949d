"""
Settings Package

빌드 설정(BuildConfig)과 cargo-query 설정(QueryConfig)을 제공합니다.
"""

from .config import BuildConfig, LoggingConfig, PickerConfig, QueryConfig
from .loader import load_query_config, resolve_env_variables

__all__ = [
    "BuildConfig",
    "LoggingConfig",
    "PickerConfig",
    "QueryConfig",
    "load_query_config",
    "resolve_env_variables",
]
