"""
配置模块
"""

from .settings import (
    AppConfig,
    load_config,
    load_sheet,
    save_sheet,
)

__all__ = [
    "AppConfig",
    "load_config",
    "load_sheet",
    "save_sheet",
]
