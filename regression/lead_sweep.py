"""Lead-offset regression sweep and model selection"""

import logging
import numpy as np
import pandas as pd
import statsmodels.api as sm
from scipy import stats
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Union

from .models import FitResult, BestFit, SweepResult
from .exceptions import InsufficientDataForOffset, NoFittableModel
from utils.progress import ProgressMonitor

logger = logging.getLogger(__name__)

TERM_NAMES = {'const': 'intercept'}

def design_matrix(data: pd.DataFrame,
                  date_origin: pd.Timestamp,
                  date_degree: int = 1) -> pd.DataFrame:
    """
    Regressors for led_deaths ~ cases_sdma + date.
    
    The date enters as days since `date_origin`; degrees above 1 add
    `date^2`, `date^3`, ... columns.
    """
    days = (pd.to_datetime(data['date']) - date_origin).dt.days.astype(float)
    
    X = pd.DataFrame({'cases_sdma': data['cases_sdma'].astype(float)}, index=data.index)
    X['date'] = days
    for power in range(2, date_degree + 1):
        X[f'date^{power}'] = days ** power
        
    return sm.add_constant(X, has_constant='add')

class LeadTimeSweep:
    def __init__(self,
                 date_degree: int = 1,
                 max_workers: Optional[int] = None,
                 show_progress: bool = False):
        """
        Parameters:
        - date_degree: Polynomial degree of the date covariate (default: linear)
        - max_workers: Threads used to fit offsets in parallel (None: sequential)
        - show_progress: Display a progress bar over offsets
        """
        if date_degree < 1:
            raise ValueError(f"date_degree must be at least 1, got {date_degree}")
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.date_degree = date_degree
        self.max_workers = max_workers
        self.show_progress = show_progress
        
    @property
    def n_params(self) -> int:
        """Intercept, case count and one term per date degree"""
        return 2 + self.date_degree
        
    def fit_offset(self, data: pd.DataFrame, lead_offset: int) -> FitResult:
        """
        Fit led_deaths on cases_sdma and date for one offset
        
        Raises InsufficientDataForOffset when the cleaned dataset is smaller
        than the number of parameters or the adjusted R² is undefined.
        """
        clean_data = (
            data[['date', 'cases_sdma', 'led_deaths']]
            .replace([np.inf, -np.inf], np.nan)
            .dropna()
        )
        dropped_rows = len(data) - len(clean_data)
        if dropped_rows > 0:
            logger.debug(f"Offset {lead_offset}: dropped {dropped_rows} rows with missing values")
            
        if len(clean_data) < self.n_params:
            raise InsufficientDataForOffset(
                lead_offset,
                f"{len(clean_data)} rows for {self.n_params} parameters"
            )
            
        # Earliest date, independent of row order
        date_origin = pd.Timestamp(clean_data['date'].min())
        X = design_matrix(clean_data, date_origin, self.date_degree)
        Y = clean_data['led_deaths'].astype(float)
        
        with np.errstate(divide='ignore', invalid='ignore'):
            results = sm.OLS(Y, X).fit()
            adj_r_squared = float(results.rsquared_adj)
            r_squared = float(results.rsquared)
            
        if not np.isfinite(adj_r_squared):
            raise InsufficientDataForOffset(
                lead_offset,
                f"adjusted R² undefined ({len(clean_data)} rows, "
                f"{int(results.df_resid)} residual degrees of freedom)"
            )
            
        return FitResult(
            lead_offset=int(lead_offset),
            model=results,
            adjusted_r_squared=adj_r_squared,
            r_squared=r_squared,
            nobs=int(results.nobs),
            date_origin=date_origin,
            date_degree=self.date_degree,
            training_start=date_origin,
            training_end=pd.Timestamp(clean_data['date'].max()),
            correlation=self._correlation(clean_data)
        )
        
    def _correlation(self, clean_data: pd.DataFrame) -> float:
        """Pearson correlation of cases and led deaths, NaN for a constant series"""
        if clean_data['cases_sdma'].nunique() < 2 or clean_data['led_deaths'].nunique() < 2:
            return np.nan
        return float(stats.pearsonr(clean_data['cases_sdma'], clean_data['led_deaths'])[0])
        
    def run(self,
            lead_rows: pd.DataFrame,
            offsets: Optional[Iterable[int]] = None) -> SweepResult:
        """
        Fit one model per lead offset
        
        Parameters:
        - lead_rows: Long-form table from LeadSeriesBuilder
        - offsets: Offsets to fit; defaults to those present in lead_rows.
          Requested offsets without rows are reported as skipped.
        """
        try:
            groups = {int(k): group for k, group in lead_rows.groupby('lead_offset')}
            offsets = sorted(groups) if offsets is None else sorted(set(int(k) for k in offsets))
            
            sweep = SweepResult()
            
            def fit_one(lead_offset: int):
                if lead_offset not in groups:
                    raise InsufficientDataForOffset(lead_offset, "no lead rows")
                return self.fit_offset(groups[lead_offset], lead_offset)
            
            outcomes = {}
            with ProgressMonitor(total=len(offsets),
                                 desc="Fitting lead offsets",
                                 logger=logger,
                                 disable=not self.show_progress) as monitor:
                if self.max_workers and self.max_workers > 1:
                    with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                        futures = {k: executor.submit(fit_one, k) for k in offsets}
                        # Collect in offset order so results do not depend on completion order
                        for k in offsets:
                            outcomes[k] = self._collect(futures[k].result, k)
                            monitor.update()
                else:
                    for k in offsets:
                        outcomes[k] = self._collect(lambda: fit_one(k), k)
                        monitor.update()
                
            for k in offsets:
                outcome = outcomes[k]
                if isinstance(outcome, FitResult):
                    sweep.fits[k] = outcome
                else:
                    sweep.skipped[k] = outcome
                    
            logger.info(f"""
            Lead offset sweep complete:
            Offsets requested: {len(offsets)}
            Offsets fitted: {len(sweep.fits)}
            Offsets skipped: {len(sweep.skipped)}
            """)
            
            return sweep
            
        except Exception as e:
            logger.error(f"Error in lead offset sweep: {str(e)}")
            raise
            
    def _collect(self, fit_call, lead_offset: int) -> Union[FitResult, str]:
        """Run a fit, turning a skipped offset into its reason"""
        try:
            return fit_call()
        except InsufficientDataForOffset as e:
            logger.warning(f"Skipping offset {lead_offset}: {e.reason}")
            return e.reason

def _no_fit_cause(skipped: Dict[int, str]) -> str:
    """Summarize skip reasons, grouping offsets that failed the same way"""
    if not skipped:
        return "no lead offsets were given"
        
    causes = {}
    for k in sorted(skipped):
        reason = skipped[k]
        if reason == "no lead rows" or "rows for" in reason:
            label = "series too short relative to the maximum lead offset"
        else:
            # Drop per-offset detail such as row counts
            label = reason.split(" (")[0]
        causes.setdefault(label, []).append(k)
        
    return "; ".join(
        f"{label} ({len(ks)} offsets, first {ks[0]}: {skipped[ks[0]]})"
        for label, ks in causes.items()
    )

def select_best_fit(fits: Union[SweepResult, Dict[int, FitResult], List[FitResult]]) -> BestFit:
    """
    Return the fit with the highest adjusted R².
    
    Offsets are scanned in ascending order and a later offset only wins with
    a strictly greater value, so exact ties go to the lowest offset.
    """
    skipped = {}
    if isinstance(fits, SweepResult):
        skipped = fits.skipped
        candidates = fits.eligible()
    elif isinstance(fits, dict):
        candidates = list(fits.values())
    else:
        candidates = list(fits)
        
    if not candidates:
        raise NoFittableModel(
            f"No lead offset could be fitted ({len(skipped)} offsets skipped): "
            f"{_no_fit_cause(skipped)}"
        )
        
    candidates = sorted(candidates, key=lambda fit: fit.lead_offset)
    best = candidates[0]
    for fit in candidates[1:]:
        if fit.adjusted_r_squared > best.adjusted_r_squared:
            best = fit
            
    logger.info(
        f"Selected lead offset {best.lead_offset} "
        f"(adjusted R² {best.adjusted_r_squared:.4f}, {best.nobs} observations) "
        f"from {len(candidates)} candidates"
    )
    
    return BestFit.from_fit(best, n_candidates=len(candidates))

def coefficient_table(fit: FitResult) -> pd.DataFrame:
    """Estimate, standard error, t statistic and p-value for each model term"""
    results = fit.model
    table = pd.DataFrame({
        'term': [TERM_NAMES.get(name, name) for name in results.params.index],
        'estimate': results.params.values,
        'std_error': results.bse.values,
        'statistic': results.tvalues.values,
        'p_value': results.pvalues.values
    })
    return table
