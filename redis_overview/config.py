"""
配置加载模块

从 config.yaml 加载配置，支持 Pydantic 验证和环境变量指定路径。
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field


class TargetConfig(BaseModel):
    """监控目标配置（单机或集群）"""
    id: str
    host: str = "127.0.0.1"
    port: int = 6379
    cluster: bool = False
    username: Optional[str] = None
    password: Optional[str] = None
    db: int = 0
    tls: bool = False


class CollectorConfig(BaseModel):
    """采集配置"""
    interval: int = 5
    timeout: float = 2.0


class CpuTrackerConfig(BaseModel):
    """CPU 基线配置（ttl_seconds 为 0 时不淘汰）"""
    ttl_seconds: int = 3600


class FormatterConfig(BaseModel):
    """回复格式化配置"""
    default: str = "raw"


class APIConfig(BaseModel):
    """API 服务配置"""
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: List[str] = ["http://localhost:8080", "http://127.0.0.1:8080"]


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "INFO"
    file: Optional[str] = None


class AppConfig(BaseModel):
    """应用配置（完整配置）"""
    targets: List[TargetConfig] = Field(default_factory=list)
    collector: CollectorConfig = Field(default_factory=CollectorConfig)
    cpu_tracker: CpuTrackerConfig = Field(default_factory=CpuTrackerConfig)
    formatter: FormatterConfig = Field(default_factory=FormatterConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def get_target(self, target_id: str) -> Optional[TargetConfig]:
        """按 ID 查找目标"""
        for target in self.targets:
            if target.id == target_id:
                return target
        return None


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    加载配置文件

    优先级：
    1. 参数指定的路径
    2. 环境变量 REDIS_OVERVIEW_CONFIG
    3. 默认路径 config.yaml
    """
    if config_path is None:
        config_path = os.environ.get("REDIS_OVERVIEW_CONFIG", "config.yaml")

    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
            if raw_config:
                # 日志文件路径相对配置文件所在目录
                log_file = (raw_config.get("logging") or {}).get("file")
                if log_file and not Path(log_file).is_absolute():
                    raw_config["logging"]["file"] = str(
                        (config_file.resolve().parent / log_file).resolve()
                    )
                return AppConfig(**raw_config)

    # 配置文件不存在时使用默认配置
    return AppConfig()


# 全局配置实例（延迟加载）
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例（单例模式）"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """重置配置（主要用于测试）"""
    global _config
    _config = None
