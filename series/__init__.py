"""
Series preparation for lead-time analysis: moving-average smoothing and
construction of lead-shifted death series.
"""

from .smoother import SeriesSmoother
from .lead_builder import LeadSeriesBuilder

__all__ = ['SeriesSmoother', 'LeadSeriesBuilder']
