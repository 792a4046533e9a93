"""
目标概览 API

提供目标列表、数据库概览和 CPU 基线管理。
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...config import AppConfig, TargetConfig
from ...connection import ClientRegistry
from ...cpu_tracker import CpuDeltaTracker
from ...exceptions import NodeConnectionError, TargetNotFoundError
from ...models import OverviewCache, OverviewRecord, TargetResponse
from ...overview import OverviewAggregator
from ..dependencies import (
    get_app_config,
    get_client_registry,
    get_cpu_tracker,
    get_overview_cache,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/targets", tags=["targets"])


def find_target(config: AppConfig, target_id: str) -> TargetConfig:
    """
    查找目标配置

    Raises:
        HTTPException: 目标不存在时返回 404
    """
    target = config.get_target(target_id)
    if target is None:
        error = TargetNotFoundError(target_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return target


@router.get("", response_model=List[TargetResponse])
async def list_targets(
    config: AppConfig = Depends(get_app_config),
    overview_cache: OverviewCache = Depends(get_overview_cache),
):
    """获取所有目标及最新概览"""
    all_latest = await overview_cache.get_all_latest()
    return [
        TargetResponse(
            id=target.id,
            host=target.host,
            port=target.port,
            cluster=target.cluster,
            overview=all_latest.get(target.id),
        )
        for target in config.targets
    ]


@router.get("/{target_id}/overview", response_model=OverviewRecord)
async def get_target_overview(
    target_id: str,
    config: AppConfig = Depends(get_app_config),
    registry: ClientRegistry = Depends(get_client_registry),
    tracker: CpuDeltaTracker = Depends(get_cpu_tracker),
    overview_cache: OverviewCache = Depends(get_overview_cache),
):
    """
    获取数据库概览

    优先返回采集循环的缓存结果；尚无缓存时立即采集一次。
    任一节点不可达时返回 503。
    """
    target = find_target(config, target_id)

    latest = await overview_cache.get_latest(target.id)
    if latest is not None:
        return latest

    try:
        nodes = await registry.get_nodes(target)
        record = await OverviewAggregator(tracker).get_overview(target.id, nodes)
    except NodeConnectionError as e:
        logger.warning(f"Overview for {target.id} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )

    await overview_cache.set_latest(target.id, record)
    return record


@router.delete("/{target_id}/cpu-baseline")
async def delete_cpu_baseline(
    target_id: str,
    config: AppConfig = Depends(get_app_config),
    tracker: CpuDeltaTracker = Depends(get_cpu_tracker),
):
    """删除目标的 CPU 基线，下一次采集重新建立"""
    target = find_target(config, target_id)
    removed = tracker.remove(target.id)
    logger.info(f"CPU baseline for {target.id} removed: {removed}")
    return {"success": True, "removed": removed}
