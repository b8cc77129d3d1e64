from typing import List, Optional
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

class CovidVisualizer:
    """Static charts of smoothed case and death series"""
    
    def __init__(self, style: str = 'whitegrid'):
        """
        Initialize visualizer
        
        Parameters:
        -----------
        style : str
            Seaborn style to use. Default is 'whitegrid'.
        """
        try:
            sns.set_theme(style=style)
        except ValueError:
            sns.set_theme(style='whitegrid')
            logger.warning(f"Style '{style}' not found, using whitegrid")
        
        self.colors = sns.color_palette()
        
    def plot_co_movement(self,
                         smoothed: pd.DataFrame,
                         regions: Optional[List[str]] = None,
                         title: Optional[str] = None,
                         save_path: Optional[Path] = None) -> plt.Figure:
        """
        Plot smoothed cases and deaths per region on twin y-axes
        
        Parameters:
        -----------
        smoothed : DataFrame
            Output of SeriesSmoother with region, date, cases_sdma, deaths_sdma
        regions : list, optional
            Regions to plot; all regions when omitted
        title : str, optional
            Figure title
        save_path : Path, optional
            Path to save figure
        """
        if smoothed.empty:
            raise ValueError("Empty input data")
            
        regions = regions or sorted(smoothed['region'].unique().tolist())
        unknown = [r for r in regions if r not in set(smoothed['region'])]
        if unknown:
            raise ValueError(f"Regions not in data: {unknown}")
        
        fig, axes = plt.subplots(len(regions), 1, figsize=(12, 4 * len(regions)), squeeze=False)
        
        for ax, region in zip(axes[:, 0], regions):
            data = smoothed[smoothed['region'] == region]
            
            ax.plot(data['date'], data['cases_sdma'], color=self.colors[0], label='Cases (7-day avg)')
            ax.set_ylabel('Cases', color=self.colors[0])
            ax.set_title(region)
            
            twin = ax.twinx()
            twin.plot(data['date'], data['deaths_sdma'], color=self.colors[3], label='Deaths (7-day avg)')
            twin.set_ylabel('Deaths', color=self.colors[3])
            twin.grid(False)
            
            lines = ax.get_lines() + twin.get_lines()
            ax.legend(lines, [line.get_label() for line in lines], loc='upper left')
            
        axes[-1, 0].set_xlabel('Date')
        if title:
            fig.suptitle(title)
            
        fig.tight_layout()
        
        if save_path:
            fig.savefig(save_path)
            logger.info(f"Saved co-movement chart to {save_path}")
            
        return fig
        
    def close_all(self):
        """Close all figures"""
        plt.close('all')
