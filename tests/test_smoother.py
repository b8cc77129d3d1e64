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

@pytest.fixture
def canada_data():
    """30 days of strictly increasing cases and constant deaths"""
    dates = pd.date_range('2020-03-08', '2020-04-06')
    return pd.DataFrame({
        'region': 'Canada',
        'date': dates,
        'cases': np.arange(1, len(dates) + 1) * 10,
        'deaths': 5
    })

@pytest.fixture
def two_regions():
    """Two regions with very different levels"""
    np.random.seed(42)
    dates = pd.date_range('2020-03-01', periods=20)
    frames = []
    for region, level in [('Alpha', 100), ('Beta', 10000)]:
        frames.append(pd.DataFrame({
            'region': region,
            'date': dates,
            'cases': np.random.poisson(level, len(dates)),
            'deaths': np.random.poisson(level / 50, len(dates))
        }))
    return pd.concat(frames, ignore_index=True)

def test_canada_scenario(canada_data):
    """Increasing cases stay increasing and constant deaths stay constant"""
    smoothed = SeriesSmoother().smooth(canada_data)
    
    assert len(smoothed) == 30
    assert smoothed['cases_sdma'].iloc[:6].isna().all()
    assert smoothed['deaths_sdma'].iloc[:6].isna().all()
    
    cases = smoothed['cases_sdma'].iloc[6:]
    assert cases.notna().all()
    assert (cases.diff().dropna() > 0).all()
    
    np.testing.assert_allclose(smoothed['deaths_sdma'].iloc[6:], 5.0)

def test_trailing_window_values(canada_data):
    """Value on day d is the mean of days d-6..d"""
    smoothed = SeriesSmoother().smooth(canada_data)
    
    for i in [6, 10, 29]:
        expected = canada_data['cases'].iloc[i - 6:i + 1].mean()
        assert smoothed['cases_sdma'].iloc[i] == pytest.approx(expected)

@pytest.mark.parametrize("n_days", [1, 3, 6])
def test_short_series_all_missing(n_days):
    """Fewer than 7 observations leaves every value missing"""
    data = pd.DataFrame({
        'region': 'Tiny',
        'date': pd.date_range('2020-03-01', periods=n_days),
        'cases': np.arange(n_days),
        'deaths': np.arange(n_days)
    })
    smoothed = SeriesSmoother().smooth(data)
    
    assert len(smoothed) == n_days
    assert smoothed['cases_sdma'].isna().all()
    assert smoothed['deaths_sdma'].isna().all()

@pytest.mark.parametrize("n_days", [7, 8, 40])
def test_warm_up_count(n_days):
    """Exactly 6 leading missing values and N-6 defined values"""
    data = pd.DataFrame({
        'region': 'R',
        'date': pd.date_range('2020-03-01', periods=n_days),
        'cases': np.ones(n_days),
        'deaths': np.zeros(n_days)
    })
    smoothed = SeriesSmoother().smooth(data)
    
    assert smoothed['cases_sdma'].isna().sum() == 6
    assert smoothed['cases_sdma'].notna().sum() == n_days - 6
    # Zero deaths are a defined value, not missing
    assert smoothed['deaths_sdma'].notna().sum() == n_days - 6

def test_regions_smoothed_independently(two_regions):
    """No window spans a region boundary"""
    smoother = SeriesSmoother()
    smoothed = smoother.smooth(two_regions)
    
    for region in ['Alpha', 'Beta']:
        together = smoothed[smoothed['region'] == region].reset_index(drop=True)
        alone = smoother.smooth(two_regions[two_regions['region'] == region])
        
        assert together['cases_sdma'].iloc[:6].isna().all()
        np.testing.assert_allclose(
            together['cases_sdma'].iloc[6:].to_numpy(),
            alone['cases_sdma'].iloc[6:].to_numpy()
        )

def test_unsorted_input_is_sorted(canada_data):
    """Rows are ordered by date before windowing"""
    shuffled = canada_data.sample(frac=1, random_state=0)
    smoothed = SeriesSmoother().smooth(shuffled)
    expected = SeriesSmoother().smooth(canada_data)
    
    assert smoothed['date'].is_monotonic_increasing
    np.testing.assert_allclose(
        smoothed['cases_sdma'].to_numpy(),
        expected['cases_sdma'].to_numpy(),
        equal_nan=True
    )

def test_invalid_parameters(canada_data):
    """Test invalid window and missing columns"""
    with pytest.raises(ValueError):
        SeriesSmoother(window=0)
        
    with pytest.raises(ValueError, match="Missing columns"):
        SeriesSmoother().smooth(canada_data.drop(columns=['deaths']))
