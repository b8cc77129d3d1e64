"""Visualization module for lead-time regression results"""

import logging
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

class LeadTimeVisualizer:
    """Interactive charts of fit quality and back-test results"""
    
    def plot_fit_quality(self,
                         summary: pd.DataFrame,
                         best_offset: Optional[int] = None,
                         region: Optional[str] = None) -> go.Figure:
        """
        Plot adjusted R² against lead offset
        
        Parameters:
        - summary: Per-offset table from SweepResult.summary()
        - best_offset: Selected offset to highlight
        - region: Optional region name for the title
        """
        if summary.empty:
            raise ValueError("Empty fit summary")
            
        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=summary['lead_offset'],
                y=summary['adjusted_r_squared'],
                mode='lines+markers',
                name='Adjusted R²',
                line=dict(color='blue')
            )
        )
        
        if best_offset is not None:
            best = summary[summary['lead_offset'] == best_offset]
            fig.add_trace(
                go.Scatter(
                    x=best['lead_offset'],
                    y=best['adjusted_r_squared'],
                    mode='markers',
                    name=f'Selected offset ({best_offset} days)',
                    marker=dict(color='red', size=12, symbol='star')
                )
            )
            
        title = 'Fit quality by lead offset'
        if region:
            title += f' - {region}'
        fig.update_layout(
            title=title,
            xaxis_title='Lead offset (days)',
            yaxis_title='Adjusted R²',
            showlegend=True
        )
        
        return fig
        
    def plot_backtest(self,
                      comparison: pd.DataFrame,
                      lead_offset: int,
                      region: Optional[str] = None) -> go.Figure:
        """
        Plot actual vs predicted deaths with the prediction error below
        
        Parameters:
        - comparison: Table from Backtester.compare()
        - lead_offset: Offset of the model that produced the predictions
        - region: Optional region name for the title
        """
        if comparison.empty:
            raise ValueError("Empty comparison table")
            
        label = f' - {region}' if region else ''
        fig = make_subplots(
            rows=2, cols=1,
            subplot_titles=(
                f'Actual vs predicted deaths (7-day average){label}',
                'Prediction error'
            ),
            vertical_spacing=0.12,
            row_heights=[0.7, 0.3]
        )
        
        fig.add_trace(
            go.Scatter(
                x=comparison['date'],
                y=comparison['actual_deaths_sdma'],
                name='Actual deaths',
                line=dict(color='blue')
            ),
            row=1, col=1
        )
        
        fig.add_trace(
            go.Scatter(
                x=comparison['date'],
                y=comparison['predicted_deaths'],
                name=f'Predicted deaths ({lead_offset}-day lead)',
                line=dict(color='red', dash='dash')
            ),
            row=1, col=1
        )
        
        errors = comparison['predicted_deaths'] - comparison['actual_deaths_sdma']
        fig.add_trace(
            go.Bar(
                x=comparison['date'],
                y=errors,
                name='Predicted - actual',
                marker_color='gray'
            ),
            row=2, col=1
        )
        
        fig.update_layout(height=700, showlegend=True)
        
        return fig
        
    def save(self, fig: go.Figure, path: Union[str, Path]) -> Path:
        """Write a figure to a standalone HTML file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.write_html(str(path))
        logger.info(f"Saved chart to {path}")
        return path
