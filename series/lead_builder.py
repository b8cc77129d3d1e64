"""Construction of lead-shifted death series"""

import logging
import pandas as pd
from typing import Optional

logger = logging.getLogger(__name__)

LEAD_COLUMNS = ['date', 'cases_sdma', 'lead_offset', 'death_date', 'led_deaths']

class LeadSeriesBuilder:
    """
    Pairs each day's smoothed case count with the smoothed death count
    observed `lead_offset` days later, for every offset in 0..max_lead.
    """
    
    def __init__(self, max_lead: int = 30):
        if max_lead < 0:
            raise ValueError(f"max_lead must be non-negative, got {max_lead}")
        self.max_lead = max_lead
        
    def build(self, smoothed: pd.DataFrame, max_lead: Optional[int] = None) -> pd.DataFrame:
        """
        Build the long-form lead table for one region.
        
        A row for (date, k) exists only when date + k is inside the observed
        range and the death average on date + k is defined. Rows are never
        imputed. `cases_sdma` can still be missing during the smoothing
        warm-up; those rows are dropped at fit time.
        
        Returns DataFrame with columns:
        date, cases_sdma, lead_offset, death_date, led_deaths
        """
        max_lead = self.max_lead if max_lead is None else max_lead
        
        try:
            series = self._prepare(smoothed)
            max_date = series['date'].max()
            
            deaths = series[['date', 'deaths_sdma']].rename(
                columns={'date': 'death_date', 'deaths_sdma': 'led_deaths'}
            )
            deaths = deaths.dropna(subset=['led_deaths'])
            
            frames = []
            for lead_offset in range(max_lead + 1):
                frame = series[['date', 'cases_sdma']].copy()
                frame['lead_offset'] = lead_offset
                frame['death_date'] = frame['date'] + pd.Timedelta(days=lead_offset)
                frame = frame[frame['death_date'] <= max_date]
                frame = frame.merge(deaths, on='death_date', how='inner')
                frames.append(frame[LEAD_COLUMNS])
                
            lead_rows = pd.concat(frames, ignore_index=True)
            lead_rows['lead_offset'] = lead_rows['lead_offset'].astype(int)
            
            empty_offsets = sorted(set(range(max_lead + 1)) - set(lead_rows['lead_offset'].unique()))
            if empty_offsets:
                logger.warning(
                    f"No lead rows for {len(empty_offsets)} offsets "
                    f"(first: {empty_offsets[0]}); series spans "
                    f"{series['date'].min().date()} to {max_date.date()}"
                )
            
            logger.info(
                f"Built {len(lead_rows):,} lead rows for offsets 0..{max_lead} "
                f"from {len(series)} days"
            )
            
            return lead_rows.sort_values(['lead_offset', 'date']).reset_index(drop=True)
            
        except Exception as e:
            logger.error(f"Error building lead series: {str(e)}")
            raise
            
    def _prepare(self, smoothed: pd.DataFrame) -> pd.DataFrame:
        """Check the single-region, dense daily contract and sort by date."""
        missing_cols = [col for col in ['date', 'cases_sdma', 'deaths_sdma'] if col not in smoothed.columns]
        if missing_cols:
            raise ValueError(f"Missing columns for lead series: {missing_cols}")
        if smoothed.empty:
            raise ValueError("Empty smoothed series")
        if 'region' in smoothed.columns and smoothed['region'].nunique() > 1:
            raise ValueError("Lead series must be built for a single region")
            
        series = smoothed[['date', 'cases_sdma', 'deaths_sdma']].copy()
        series['date'] = pd.to_datetime(series['date'])
        series = series.sort_values('date').reset_index(drop=True)
        
        if series['date'].duplicated().any():
            raise ValueError("Duplicate dates in smoothed series")
        steps = series['date'].diff().dropna()
        if (steps != pd.Timedelta(days=1)).any():
            raise ValueError("Smoothed series dates must be contiguous daily dates")
            
        return series
