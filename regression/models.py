from dataclasses import dataclass, field
import numpy as np
import pandas as pd
from typing import Any, Dict, List

@dataclass
class FitResult:
    """Container for a single lead offset's regression"""
    lead_offset: int
    model: Any  # statsmodels RegressionResultsWrapper
    adjusted_r_squared: float
    r_squared: float = np.nan
    nobs: int = 0
    date_origin: pd.Timestamp = None  # day 0 of the date covariate
    date_degree: int = 1
    training_start: pd.Timestamp = None
    training_end: pd.Timestamp = None
    correlation: float = np.nan  # Pearson r between cases_sdma and led_deaths

@dataclass
class BestFit(FitResult):
    """The selected FitResult and the number of candidates it beat"""
    n_candidates: int = 0
    
    @classmethod
    def from_fit(cls, fit: FitResult, n_candidates: int) -> 'BestFit':
        return cls(
            lead_offset=fit.lead_offset,
            model=fit.model,
            adjusted_r_squared=fit.adjusted_r_squared,
            r_squared=fit.r_squared,
            nobs=fit.nobs,
            date_origin=fit.date_origin,
            date_degree=fit.date_degree,
            training_start=fit.training_start,
            training_end=fit.training_end,
            correlation=fit.correlation,
            n_candidates=n_candidates
        )

@dataclass
class SweepResult:
    """Fits keyed by offset plus the offsets that were skipped and why"""
    fits: Dict[int, FitResult] = field(default_factory=dict)
    skipped: Dict[int, str] = field(default_factory=dict)
    
    @property
    def offsets(self) -> List[int]:
        return sorted(self.fits)
    
    def eligible(self) -> List[FitResult]:
        """Fits in ascending offset order"""
        return [self.fits[k] for k in self.offsets]
        
    def summary(self) -> pd.DataFrame:
        """Per-offset fit quality table for charting adjusted R² against offset"""
        rows = [{
            'lead_offset': fit.lead_offset,
            'adjusted_r_squared': fit.adjusted_r_squared,
            'r_squared': fit.r_squared,
            'nobs': fit.nobs,
            'correlation': fit.correlation
        } for fit in self.eligible()]
        
        columns = ['lead_offset', 'adjusted_r_squared', 'r_squared', 'nobs', 'correlation']
        return pd.DataFrame(rows, columns=columns)
