"""
概览采集循环

每个目标一个任务，每隔 interval 秒聚合一次并写入缓存。
同一目标的轮询不会重叠，CPU 基线只有一个写入方。
"""

import asyncio
import logging
from typing import Optional

from .config import TargetConfig, get_config
from .connection import ClientRegistry, get_registry
from .exceptions import NodeConnectionError
from .models import OverviewRecord, cache
from .overview import OverviewAggregator

logger = logging.getLogger(__name__)


async def poll_target(
    target: TargetConfig,
    registry: ClientRegistry,
    aggregator: OverviewAggregator,
) -> Optional[OverviewRecord]:
    """
    采集单个目标并更新缓存

    失败时保留上一次的缓存记录，返回 None。
    """
    try:
        nodes = await registry.get_nodes(target)
        record = await aggregator.get_overview(target.id, nodes)
    except NodeConnectionError as e:
        logger.warning(f"Failed to poll target {target.id}: {e}")
        return None

    await cache.set_latest(target.id, record)
    return record


async def run_target_loop(
    target: TargetConfig,
    registry: ClientRegistry,
    aggregator: OverviewAggregator,
    interval: float,
):
    """单个目标的采集循环"""
    logger.info(f"Polling target {target.id} ({target.host}:{target.port}) every {interval}s")

    while True:
        try:
            record = await poll_target(target, registry, aggregator)
            if record is not None:
                logger.debug(f"Target {target.id}: {record.model_dump(by_alias=True)}")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Poll loop error for {target.id}: {e}", exc_info=True)

        await asyncio.sleep(interval)


async def run_poller(registry: Optional[ClientRegistry] = None):
    """
    运行采集循环

    为每个配置的目标启动一个任务，退出时关闭所有客户端。
    """
    config = get_config()
    interval = config.collector.interval

    if not config.targets:
        logger.warning("No targets configured, poller idle")
        return

    registry = registry or get_registry()
    aggregator = OverviewAggregator()

    logger.info(f"Starting poller for {len(config.targets)} target(s)")
    try:
        await asyncio.gather(*(
            run_target_loop(target, registry, aggregator, interval)
            for target in config.targets
        ))
    finally:
        await registry.close_all()
