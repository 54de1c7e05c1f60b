"""
Quality report rendering.
"""

from .report_generator import ReportGenerator

__all__ = ["ReportGenerator"]
