"""Trailing moving-average smoothing of daily counts"""

import logging
import pandas as pd
from typing import Sequence

logger = logging.getLogger(__name__)

class SeriesSmoother:
    """Right-aligned simple moving average (SDMA), computed per region."""
    
    def __init__(self, window: int = 7, columns: Sequence[str] = ('cases', 'deaths')):
        """
        Parameters:
        - window: Number of trailing days averaged (default: one week)
        - columns: Count columns to smooth; output columns get a `_sdma` suffix
        """
        if window < 1:
            raise ValueError(f"Smoothing window must be positive, got {window}")
        self.window = window
        self.columns = list(columns)
        
    def smooth(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Add `<col>_sdma` columns holding the mean of the current and previous
        `window - 1` days. The first `window - 1` days of each region are NaN.
        """
        missing_cols = [col for col in ['region', 'date'] + self.columns if col not in df.columns]
        if missing_cols:
            raise ValueError(f"Missing columns for smoothing: {missing_cols}")
            
        smoothed = df.sort_values(['region', 'date']).reset_index(drop=True)
        grouped = smoothed.groupby('region', sort=False)
        
        for col in self.columns:
            smoothed[f"{col}_sdma"] = grouped[col].transform(
                lambda s: s.astype(float).rolling(window=self.window, min_periods=self.window).mean()
            )
        
        sizes = grouped.size()
        short_regions = sizes[sizes < self.window]
        for region, n_obs in short_regions.items():
            logger.warning(
                f"Region {region} has {n_obs} observations, fewer than the "
                f"{self.window}-day window; smoothed values are all missing"
            )
            
        logger.info(
            f"Smoothed {len(self.columns)} columns with a {self.window}-day window "
            f"for {len(sizes)} regions"
        )
        
        return smoothed
