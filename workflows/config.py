"""Analysis parameters"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
import pandas as pd

@dataclass
class AnalysisConfig:
    """Parameters for one lead-time analysis run"""
    region: Optional[str] = None
    max_lead: int = 30  # Longest case-to-death delay searched, in days
    smoothing_window: int = 7
    date_degree: int = 1  # Polynomial degree of the date covariate
    start_date: Optional[str] = '2020-03-08'
    end_date: Optional[str] = None
    max_workers: Optional[int] = None
    show_progress: bool = False
    
    def validate(self) -> 'AnalysisConfig':
        """Raise ValueError for inconsistent parameters"""
        if self.max_lead < 0:
            raise ValueError(f"max_lead must be non-negative, got {self.max_lead}")
        if self.smoothing_window < 1:
            raise ValueError(f"smoothing_window must be positive, got {self.smoothing_window}")
        if self.date_degree < 1:
            raise ValueError(f"date_degree must be at least 1, got {self.date_degree}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
        if self.start_date and self.end_date:
            if pd.Timestamp(self.end_date) < pd.Timestamp(self.start_date):
                raise ValueError(f"end_date {self.end_date} is before start_date {self.start_date}")
        return self
        
    @classmethod
    def from_args(cls, args) -> 'AnalysisConfig':
        """Build from an argparse namespace"""
        return cls(
            region=args.region,
            max_lead=args.max_lead,
            smoothing_window=args.window,
            date_degree=args.date_degree,
            start_date=args.start_date,
            end_date=args.end_date,
            max_workers=args.workers,
            show_progress=args.progress
        ).validate()
        
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
