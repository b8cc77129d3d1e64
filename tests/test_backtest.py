import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import pytest
import numpy as np
import pandas as pd
from series.smoother import SeriesSmoother
from series.lead_builder import LeadSeriesBuilder
from regression.lead_sweep import LeadTimeSweep, select_best_fit
from regression.backtest import Backtester
from regression.validation import verify_lead_rows, check_date_coverage
from regression.exceptions import DateRangeMismatch

TRUE_LAG = 19

def epidemic_curve(t: np.ndarray) -> np.ndarray:
    return 1000 + 800 * np.sin(2 * np.pi * t / 45) + 5 * t

@pytest.fixture
def smoothed():
    n_days = 120
    t = np.arange(n_days)
    raw = pd.DataFrame({
        'region': 'Synthetica',
        'date': pd.date_range('2020-03-08', periods=n_days),
        'cases': epidemic_curve(t),
        'deaths': 0.02 * epidemic_curve(t - TRUE_LAG)
    })
    return SeriesSmoother().smooth(raw)

@pytest.fixture
def best_fit(smoothed):
    lead_rows = LeadSeriesBuilder(max_lead=30).build(smoothed)
    return select_best_fit(LeadTimeSweep().run(lead_rows))

def test_predictions_shifted_forward_by_offset(best_fit, smoothed):
    """A prediction from cases on date d lands on d + lead_offset"""
    predictions = Backtester(best_fit).predict(smoothed)
    
    assert len(predictions) == smoothed['cases_sdma'].notna().sum()
    shift = predictions['death_date'] - predictions['date']
    assert (shift == pd.Timedelta(days=best_fit.lead_offset)).all()

def test_comparison_is_full_outer_join(best_fit, smoothed):
    comparison = Backtester(best_fit).compare(smoothed)
    first_case = smoothed.loc[smoothed['cases_sdma'].notna(), 'date'].min()
    last_date = smoothed['date'].max()
    
    assert list(comparison.columns) == ['date', 'actual_deaths_sdma', 'predicted_deaths']
    assert comparison['date'].is_unique
    assert comparison['date'].is_monotonic_increasing
    assert comparison['date'].max() == last_date + pd.Timedelta(days=TRUE_LAG)
    
    # Before the first prediction lands only actual values exist
    early = comparison[comparison['date'] < first_case + pd.Timedelta(days=TRUE_LAG)]
    assert early['predicted_deaths'].isna().all()
    assert early['actual_deaths_sdma'].notna().any()
    
    # After the last observation only predictions exist
    late = comparison[comparison['date'] > last_date]
    assert len(late) == TRUE_LAG
    assert late['actual_deaths_sdma'].isna().all()
    assert late['predicted_deaths'].notna().all()

def test_exact_lag_reproduces_actual_deaths(best_fit, smoothed):
    """With the true lag the back-test matches observed deaths where both exist"""
    comparison = Backtester(best_fit).compare(smoothed)
    both = comparison.dropna()
    
    assert len(both) > 50
    np.testing.assert_allclose(both['predicted_deaths'], both['actual_deaths_sdma'], rtol=1e-6)
    
    metrics = Backtester.metrics(comparison)
    assert metrics['n_overlap'] == len(both)
    assert metrics['rmse'] < 1e-3

def test_alignment_on_shorter_series():
    """31-day series: offset prediction dates follow date + k exactly"""
    np.random.seed(3)
    raw = pd.DataFrame({
        'region': 'Short',
        'date': pd.date_range('2020-05-01', periods=31),
        'cases': np.random.poisson(500, 31),
        'deaths': np.random.poisson(20, 31)
    })
    smoothed = SeriesSmoother().smooth(raw)
    lead_rows = LeadSeriesBuilder(max_lead=10).build(smoothed)
    fit = LeadTimeSweep().fit_offset(lead_rows[lead_rows['lead_offset'] == 4], 4)
    
    comparison = Backtester(fit).compare(smoothed)
    predicted = comparison.dropna(subset=['predicted_deaths'])
    
    assert predicted['date'].min() == pd.Timestamp('2020-05-07') + pd.Timedelta(days=4)
    assert predicted['date'].max() == pd.Timestamp('2020-05-31') + pd.Timedelta(days=4)

def test_non_overlapping_dates_warn(best_fit, smoothed):
    """Predicting on a disjoint date range is reported, not fatal"""
    later = smoothed.copy()
    later['date'] = later['date'] + pd.Timedelta(days=400)
    
    with pytest.warns(DateRangeMismatch):
        comparison = Backtester(best_fit).compare(later)
    
    assert len(comparison) > 0
    assert check_date_coverage(best_fit, smoothed['date'])

def test_metrics_without_overlap():
    comparison = pd.DataFrame({
        'date': pd.date_range('2020-03-01', periods=2),
        'actual_deaths_sdma': [1.0, np.nan],
        'predicted_deaths': [np.nan, 2.0]
    })
    metrics = Backtester.metrics(comparison)
    assert metrics['n_overlap'] == 0
    assert np.isnan(metrics['rmse'])

def test_verify_lead_rows(smoothed):
    lead_rows = LeadSeriesBuilder(max_lead=30).build(smoothed)
    verify_lead_rows(lead_rows, smoothed, max_lead=30)
    
    tampered = lead_rows.copy()
    tampered.loc[0, 'led_deaths'] += 1.0
    with pytest.raises(ValueError, match="differ"):
        verify_lead_rows(tampered, smoothed, max_lead=30)
        
    with pytest.raises(ValueError, match="outside"):
        verify_lead_rows(lead_rows, smoothed, max_lead=10)
        
    beyond = lead_rows.copy()
    beyond['death_date'] = beyond['death_date'] + pd.Timedelta(days=200)
    beyond['date'] = beyond['date'] + pd.Timedelta(days=200)
    with pytest.raises(ValueError, match="unobserved"):
        verify_lead_rows(beyond, smoothed, max_lead=30)
