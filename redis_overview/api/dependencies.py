"""
依赖注入模块

提供 FastAPI 依赖项。
"""

from ..config import AppConfig, get_config
from ..connection import ClientRegistry, get_registry
from ..cpu_tracker import CpuDeltaTracker, get_tracker
from ..models import OverviewCache, cache


async def get_app_config() -> AppConfig:
    """获取配置"""
    return get_config()


async def get_client_registry() -> ClientRegistry:
    """获取客户端缓存"""
    return get_registry()


async def get_cpu_tracker() -> CpuDeltaTracker:
    """获取 CPU 基线存储"""
    return get_tracker()


async def get_overview_cache() -> OverviewCache:
    """获取最新概览缓存"""
    return cache
