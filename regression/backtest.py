"""Back-testing of the selected lead-offset model"""

import logging
import warnings
import numpy as np
import pandas as pd
from typing import Dict

from .exceptions import DateRangeMismatch
from .lead_sweep import design_matrix
from .models import FitResult
from .validation import check_date_coverage

logger = logging.getLogger(__name__)

class Backtester:
    """Applies a fitted model to the full case history and lines it up with observed deaths"""
    
    def __init__(self, fit: FitResult):
        self.fit = fit
        
    def predict(self, smoothed: pd.DataFrame) -> pd.DataFrame:
        """
        Predicted deaths for every date with a defined case average.
        
        A prediction made from cases on `date` is expected on
        `death_date = date + lead_offset`.
        
        Returns DataFrame with columns: date, death_date, predicted_deaths
        """
        try:
            cases = smoothed[['date', 'cases_sdma']].copy()
            cases['date'] = pd.to_datetime(cases['date'])
            cases = cases.dropna(subset=['cases_sdma']).sort_values('date')
            
            check_date_coverage(self.fit, cases['date'])
            
            if cases.empty:
                return pd.DataFrame(columns=['date', 'death_date', 'predicted_deaths'])
                
            X = design_matrix(cases, self.fit.date_origin, self.fit.date_degree)
            predictions = pd.DataFrame({
                'date': cases['date'].to_numpy(),
                'death_date': (cases['date'] + pd.Timedelta(days=self.fit.lead_offset)).to_numpy(),
                'predicted_deaths': np.asarray(self.fit.model.predict(X), dtype=float)
            })
            
            return predictions
            
        except Exception as e:
            logger.error(f"Error predicting deaths: {str(e)}")
            raise
            
    def compare(self, smoothed: pd.DataFrame) -> pd.DataFrame:
        """
        Actual-vs-predicted table keyed on the death date.
        
        Full outer join: the first lead_offset days have only actual values
        and the last lead_offset days only predictions.
        
        Returns DataFrame with columns: date, actual_deaths_sdma, predicted_deaths
        """
        try:
            predictions = self.predict(smoothed)
            
            actual = smoothed[['date', 'deaths_sdma']].copy()
            actual['date'] = pd.to_datetime(actual['date'])
            actual = actual.rename(columns={'deaths_sdma': 'actual_deaths_sdma'})
            
            predicted = predictions[['death_date', 'predicted_deaths']].rename(
                columns={'death_date': 'date'}
            )
            predicted['date'] = pd.to_datetime(predicted['date'])
            
            comparison = actual.merge(predicted, on='date', how='outer')
            comparison = comparison.sort_values('date').reset_index(drop=True)
            comparison['predicted_deaths'] = comparison['predicted_deaths'].astype(float)
            
            both = comparison.dropna(subset=['actual_deaths_sdma', 'predicted_deaths'])
            if both.empty:
                message = (
                    f"No date has both an actual and a predicted death value "
                    f"for offset {self.fit.lead_offset}"
                )
                logger.warning(message)
                warnings.warn(message, DateRangeMismatch)
                
            logger.info(f"""
            Back-test for lead offset {self.fit.lead_offset}:
            Dates: {comparison['date'].min()} to {comparison['date'].max()}
            Actual only: {comparison['predicted_deaths'].isna().sum()}
            Predicted only: {comparison['actual_deaths_sdma'].isna().sum()}
            Both: {len(both)}
            """)
            
            return comparison
            
        except Exception as e:
            logger.error(f"Error in back-test comparison: {str(e)}")
            raise
            
    @staticmethod
    def metrics(comparison: pd.DataFrame) -> Dict[str, float]:
        """Error statistics over dates where both sides are present"""
        both = comparison.dropna(subset=['actual_deaths_sdma', 'predicted_deaths'])
        if both.empty:
            return {'n_overlap': 0, 'mae': np.nan, 'rmse': np.nan}
            
        errors = both['predicted_deaths'] - both['actual_deaths_sdma']
        return {
            'n_overlap': int(len(both)),
            'mae': float(errors.abs().mean()),
            'rmse': float(np.sqrt((errors ** 2).mean()))
        }
