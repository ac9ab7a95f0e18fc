"""Metrics exports."""

from .base import IMetric
from .core import UsageMetrics

__all__ = ["IMetric", "UsageMetrics"]
