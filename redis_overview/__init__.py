"""
Redis Overview - Redis 数据库概览聚合服务

负责：
- 周期性拉取目标（单机/集群）所有节点的 INFO
- 按指标规则聚合为一条概览记录（含基于增量的 CPU 使用率）
- 将命令回复规范化为 JSON 安全的结构
- 提供 REST API 给前端
"""

__version__ = "1.0.0"
__author__ = "AI-B"
