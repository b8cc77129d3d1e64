"""Complete lead-time workflow with proper sequencing"""

import logging
import pandas as pd
from typing import Any, Dict, Optional

from data_manager.data_loader import CaseDataLoader
from data_manager.data_validator import CaseDataValidator
from series.smoother import SeriesSmoother
from series.lead_builder import LeadSeriesBuilder
from regression.lead_sweep import LeadTimeSweep, select_best_fit, coefficient_table
from regression.backtest import Backtester
from regression.validation import verify_lead_rows
from workflows.config import AnalysisConfig

def run_lead_analysis(
    raw: pd.DataFrame,
    config: AnalysisConfig,
    logger: Optional[logging.Logger] = None
) -> Dict[str, Any]:
    """
    Run the lead-time analysis for config.region
    
    Steps:
    1. Validate and smooth all regions
    2. Build lead-shifted death series for the target region
    3. Fit one model per offset and select the best
    4. Back-test the selected model on the full case history
    
    raw must already be cleaned to (region, date, cases, deaths).
    NoFittableModel propagates when no offset can be fitted.
    """
    logger = logger or logging.getLogger('lead_analysis')
    
    try:
        config.validate()
        if not config.region:
            raise ValueError("A target region is required")
            
        # 1. Validate and smooth
        validator = CaseDataValidator()
        is_valid, issues = validator.validate(raw)
        if not is_valid:
            for issue in issues:
                logger.warning(f"Data issue: {issue}")
            
        loader = CaseDataLoader()
        region_raw = loader.for_region(raw, config.region)
        validator.validate_region_series(region_raw)
        
        smoother = SeriesSmoother(window=config.smoothing_window)
        smoothed = smoother.smooth(raw)
        region_smoothed = smoother.smooth(region_raw)
        
        # 2. Lead series
        logger.info(f"Building lead series for {config.region} with offsets 0..{config.max_lead}")
        builder = LeadSeriesBuilder(max_lead=config.max_lead)
        lead_rows = builder.build(region_smoothed)
        verify_lead_rows(lead_rows, region_smoothed, config.max_lead)
        
        # 3. Sweep and select
        sweep = LeadTimeSweep(
            date_degree=config.date_degree,
            max_workers=config.max_workers,
            show_progress=config.show_progress
        ).run(lead_rows, offsets=range(config.max_lead + 1))
        best_fit = select_best_fit(sweep)
        
        # 4. Back-test
        backtester = Backtester(best_fit)
        comparison = backtester.compare(region_smoothed)
        metrics = backtester.metrics(comparison)
        
        logger.info(f"""
        Lead-time analysis for {config.region}:
        Best lead offset: {best_fit.lead_offset} days
        Adjusted R²: {best_fit.adjusted_r_squared:.4f}
        Back-test MAE: {metrics['mae']:.3f} over {metrics['n_overlap']} days
        """)
        
        return {
            'smoothed': smoothed,
            'region_smoothed': region_smoothed,
            'lead_rows': lead_rows,
            'sweep': sweep,
            'fit_summary': sweep.summary(),
            'best_fit': best_fit,
            'coefficients': coefficient_table(best_fit),
            'comparison': comparison,
            'metrics': metrics
        }
        
    except Exception as e:
        logger.error(f"Error in lead-time analysis: {str(e)}")
        raise
