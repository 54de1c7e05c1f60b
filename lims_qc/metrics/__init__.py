"""
Metrics Package

Handles observability and monitoring.
"""

from .prometheus import (
    QualityMetrics,
    get_metrics,
    reset_metrics,
    metrics_endpoint
)

__all__ = [
    'QualityMetrics',
    'get_metrics',
    'reset_metrics',
    'metrics_endpoint'
]
