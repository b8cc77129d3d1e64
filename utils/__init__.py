"""Utility functions and classes for lead-time analysis"""

from .progress import ProgressMonitor
from .visualization import CovidVisualizer

__all__ = ['ProgressMonitor', 'CovidVisualizer']
