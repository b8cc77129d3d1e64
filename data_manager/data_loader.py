"""
Data loader for daily COVID-19 case and death counts.
"""

import logging
import pandas as pd
from typing import Dict, Optional, Union
from pathlib import Path

logger = logging.getLogger(__name__)

# Source headers seen in the common public datasets, mapped to our names
DEFAULT_COLUMN_MAP = {
    'location': 'region',
    'countriesAndTerritories': 'region',
    'Country/Region': 'region',
    'country': 'region',
    'state': 'region',
    'dateRep': 'date',
    'Date': 'date',
    'new_cases': 'cases',
    'positiveIncrease': 'cases',
    'new_deaths': 'deaths',
    'deathIncrease': 'deaths',
}

REQUIRED_COLUMNS = ['region', 'date', 'cases', 'deaths']

class CaseDataLoader:
    """Loads and cleans region-level daily case/death series."""
    
    def __init__(self, column_map: Optional[Dict[str, str]] = None):
        """Initialize with an optional source-to-standard column mapping"""
        self.column_map = dict(DEFAULT_COLUMN_MAP)
        if column_map:
            self.column_map.update(column_map)
        
    def load_csv(self, source: Union[str, Path]) -> pd.DataFrame:
        """Read a raw CSV from a local path or URL."""
        try:
            logger.info(f"Reading case data from: {source}")
            df = pd.read_csv(source)
            logger.info(f"Total rows in CSV: {len(df):,}")
            return df
            
        except Exception as e:
            logger.error(f"Error loading case data: {str(e)}")
            raise
            
    def clean(self,
              df: pd.DataFrame,
              start_date: Optional[str] = None,
              end_date: Optional[str] = None,
              cumulative: bool = False) -> pd.DataFrame:
        """
        Standardize a raw table to (region, date, cases, deaths)
        
        Parameters:
        - df: Raw table as read from the source
        - start_date: Optional date floor (YYYY-MM-DD)
        - end_date: Optional date ceiling (YYYY-MM-DD)
        - cumulative: Source counts are running totals and must be differenced
        """
        renames = {src: dst for src, dst in self.column_map.items()
                   if src in df.columns and dst not in df.columns}
        clean_df = df.rename(columns=renames)
        
        missing_cols = [col for col in REQUIRED_COLUMNS if col not in clean_df.columns]
        if missing_cols:
            raise ValueError(f"Missing required columns after renaming: {missing_cols}")
            
        clean_df = clean_df[REQUIRED_COLUMNS].copy()
        clean_df['date'] = pd.to_datetime(clean_df['date'])
        clean_df['region'] = clean_df['region'].astype(str)
        clean_df = clean_df.sort_values(['region', 'date']).reset_index(drop=True)
        
        if cumulative:
            clean_df = self._to_daily_counts(clean_df)
        
        if start_date:
            clean_df = clean_df[clean_df['date'] >= pd.Timestamp(start_date)]
        if end_date:
            clean_df = clean_df[clean_df['date'] <= pd.Timestamp(end_date)]
            
        clean_df = clean_df.reset_index(drop=True)
        
        if len(clean_df) > 0:
            logger.info(
                f"Cleaned case data: {clean_df['region'].nunique()} regions, "
                f"{clean_df['date'].min().date()} to {clean_df['date'].max().date()}, "
                f"{len(clean_df):,} rows"
            )
        else:
            logger.warning("No rows left after date filtering")
            
        return clean_df
        
    def _to_daily_counts(self, df: pd.DataFrame) -> pd.DataFrame:
        """Convert running totals to daily new counts, per region."""
        daily = df.copy()
        for col in ['cases', 'deaths']:
            diffs = daily.groupby('region')[col].diff()
            # The first day of each region keeps its running total
            diffs = diffs.fillna(daily[col])
            corrections = (diffs < 0).sum()
            if corrections > 0:
                logger.warning(f"Clipped {corrections} negative daily {col} (data corrections) to 0")
            daily[col] = diffs.clip(lower=0)
        return daily
        
    def for_region(self, df: pd.DataFrame, region: str) -> pd.DataFrame:
        """
        Extract one region as a dense, date-sorted daily series.
        
        Calendar days absent from the source are inserted with zero counts.
        Repeated dates raise ValueError.
        """
        region_df = df[df['region'] == region]
        if region_df.empty:
            available = sorted(df['region'].unique().tolist())[:10]
            raise ValueError(f"Unknown region '{region}' (first available: {available})")
            
        duplicated = region_df.loc[region_df['date'].duplicated(), 'date']
        if not duplicated.empty:
            shown = sorted(pd.to_datetime(duplicated.unique()).strftime('%Y-%m-%d'))[:5]
            raise ValueError(
                f"Duplicate dates for region '{region}': {len(duplicated)} repeated rows "
                f"(first dates: {shown}); keep one row per date"
            )
            
        region_df = region_df.sort_values('date').set_index('date')
        full_range = pd.date_range(region_df.index.min(), region_df.index.max(), freq='D')
        
        n_missing = len(full_range) - len(region_df)
        if n_missing > 0:
            logger.warning(f"Filled {n_missing} missing calendar days for {region} with zero counts")
            
        region_df = region_df[['cases', 'deaths']].reindex(full_range, fill_value=0)
        region_df.index.name = 'date'
        region_df = region_df.reset_index()
        region_df.insert(0, 'region', region)
        
        return region_df
