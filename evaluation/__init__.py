"""
Evaluation Layer - AI 对战评估

Modules:
    arena: 对战竞技场
    metrics: 名次统计
"""
from .arena import (
    TournamentResult,
    Arena,
)
from .metrics import (
    MatchResult,
    MetricsCollector,
)

__all__ = [
    # arena
    "TournamentResult",
    "Arena",
    # metrics
    "MatchResult",
    "MetricsCollector",
]
