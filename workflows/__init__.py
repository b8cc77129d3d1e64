"""End-to-end lead-time analysis workflow"""

from .config import AnalysisConfig
from .run_lead_analysis import run_lead_analysis

__all__ = ['AnalysisConfig', 'run_lead_analysis']
