"""
Data management package for COVID-19 lead-time analysis.
Handles data loading and validation.
"""

from .data_loader import CaseDataLoader
from .data_validator import CaseDataValidator

__all__ = ['CaseDataLoader', 'CaseDataValidator']
