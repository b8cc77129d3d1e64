"""
Lead-time regression package.
Fits deaths on lagged case counts over a range of offsets, selects the
best offset and back-tests the selected model.
"""

from .models import FitResult, BestFit, SweepResult
from .exceptions import InsufficientDataForOffset, NoFittableModel, DateRangeMismatch
from .lead_sweep import LeadTimeSweep, select_best_fit, coefficient_table
from .backtest import Backtester

__all__ = [
    'FitResult', 'BestFit', 'SweepResult',
    'InsufficientDataForOffset', 'NoFittableModel', 'DateRangeMismatch',
    'LeadTimeSweep', 'select_best_fit', 'coefficient_table',
    'Backtester',
]
