"""
Validation of the case/death table contract consumed by the analysis.
"""

import pandas as pd
from typing import List, Tuple

class CaseDataValidator:
    """Validates daily case/death tables before smoothing."""
    
    def __init__(self):
        self.required_columns = ['region', 'date', 'cases', 'deaths']
        self.count_columns = ['cases', 'deaths']

    def validate(self, df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """
        Validates a multi-region case/death table.
        
        Args:
            df: DataFrame with region, date, cases and deaths columns
            
        Returns:
            Tuple of (is_valid, list_of_issues)
        """
        issues = []
        
        missing_cols = [col for col in self.required_columns if col not in df.columns]
        if missing_cols:
            issues.append(f"Missing required columns: {missing_cols}")
            return False, issues
        
        for col in self.required_columns:
            missing_count = df[col].isna().sum()
            if missing_count > 0:
                issues.append(f"Column {col} has {missing_count} missing values")
        
        for col in self.count_columns:
            issues.extend(self._validate_non_negative(df[col], col))
            
        duplicates = df.duplicated(subset=['region', 'date']).sum()
        if duplicates > 0:
            issues.append(f"Found {duplicates} duplicate (region, date) rows")
            
        for region, group in df.groupby('region'):
            gaps = self._count_gaps(group['date'])
            if gaps > 0:
                issues.append(f"Region {region}: {gaps} gaps in daily dates")
        
        return len(issues) == 0, issues

    def _validate_non_negative(self, series: pd.Series, name: str) -> List[str]:
        """Validates that counts are not negative."""
        issues = []
        negative = series[series < 0]
        if not negative.empty:
            issues.append(
                f"{name}: {len(negative)} negative values "
                f"(first occurrence at index {negative.index[0]})"
            )
        return issues

    def _count_gaps(self, dates: pd.Series) -> int:
        """Number of missing days between consecutive sorted dates."""
        ordered = pd.to_datetime(dates).drop_duplicates().sort_values()
        if len(ordered) < 2:
            return 0
        steps = ordered.diff().dropna().dt.days
        return int((steps - 1).clip(lower=0).sum())

    def validate_region_series(self, df: pd.DataFrame) -> None:
        """
        Enforces the single-region contract of the lead-time analysis:
        one region, dates sorted ascending, dense daily dates.
        
        Raises:
            ValueError: describing the first violated condition
        """
        if df.empty:
            raise ValueError("Empty region series")
            
        if 'region' in df.columns and df['region'].nunique() > 1:
            raise ValueError(
                f"Expected a single region, got {df['region'].nunique()}: "
                f"{sorted(df['region'].unique().tolist())}"
            )
            
        dates = pd.to_datetime(df['date'])
        if dates.duplicated().any():
            raise ValueError("Duplicate dates in region series")
        if not dates.is_monotonic_increasing:
            raise ValueError("Region series is not sorted by date")
        
        gaps = self._count_gaps(dates)
        if gaps > 0:
            raise ValueError(f"Region series has {gaps} missing days; dates must be contiguous")
