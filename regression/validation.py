"""Consistency checks for lead rows and prediction coverage"""

import logging
import warnings
import numpy as np
import pandas as pd

from .exceptions import DateRangeMismatch
from .models import FitResult

logger = logging.getLogger(__name__)

def verify_lead_rows(lead_rows: pd.DataFrame, smoothed: pd.DataFrame, max_lead: int):
    """Verify every lead row pairs a case date with the death average lead_offset days later"""
    try:
        if len(lead_rows) == 0:
            logger.warning("No lead rows to verify")
            return
            
        max_date = pd.to_datetime(smoothed['date']).max()
        
        out_of_range = lead_rows[
            (lead_rows['lead_offset'] < 0) | (lead_rows['lead_offset'] > max_lead)
        ]
        if len(out_of_range) > 0:
            raise ValueError(
                f"Found {len(out_of_range)} lead rows with offsets outside 0..{max_lead}"
            )
            
        expected_death_date = lead_rows['date'] + pd.to_timedelta(lead_rows['lead_offset'], unit='D')
        if (expected_death_date != lead_rows['death_date']).any():
            raise ValueError("Lead rows with death_date != date + lead_offset")
            
        beyond = lead_rows[lead_rows['death_date'] > max_date]
        if len(beyond) > 0:
            raise ValueError(f"""
            Found {len(beyond)} lead rows requiring unobserved deaths:
            First violation: offset {beyond['lead_offset'].iloc[0]}
            on {beyond['date'].iloc[0]} (last observed date {max_date})
            """)
            
        actual = smoothed.set_index(pd.to_datetime(smoothed['date']))['deaths_sdma']
        matched = actual.reindex(lead_rows['death_date']).to_numpy()
        if not np.allclose(matched, lead_rows['led_deaths'].to_numpy(), equal_nan=False):
            raise ValueError("Lead rows whose led_deaths differ from the observed death average")
            
        logger.info(f"""
        Verified lead rows:
        Rows: {len(lead_rows):,}
        Offsets: {lead_rows['lead_offset'].min()} to {lead_rows['lead_offset'].max()}
        """)
        
    except Exception as e:
        logger.error(f"Error verifying lead rows: {str(e)}")
        raise

def check_date_coverage(fit: FitResult, dates: pd.Series) -> bool:
    """
    Warn with DateRangeMismatch when the prediction dates miss the
    model's training range entirely. Returns True when they overlap.
    """
    dates = pd.to_datetime(pd.Series(dates)).dropna()
    if dates.empty:
        message = f"No case dates to predict from for offset {fit.lead_offset}"
        logger.warning(message)
        warnings.warn(message, DateRangeMismatch)
        return False
        
    start, end = dates.min(), dates.max()
    overlaps = start <= fit.training_end and end >= fit.training_start
    if not overlaps:
        message = (
            f"Prediction dates {start.date()} to {end.date()} do not overlap the "
            f"training dates {fit.training_start.date()} to {fit.training_end.date()}; "
            f"coverage is partial"
        )
        logger.warning(message)
        warnings.warn(message, DateRangeMismatch)
        return False
        
    outside = int(((dates < fit.training_start) | (dates > fit.training_end)).sum())
    if outside > 0:
        logger.info(f"{outside} prediction dates fall outside the training range")
        
    return True
