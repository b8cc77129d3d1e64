#!/usr/bin/env python
"""
Lead-time analysis pipeline for COVID-19 cases and deaths.
Smooths daily counts, searches case-to-death lead offsets and back-tests
the best-fitting regression.
"""
import sys
import argparse
from pathlib import Path
import logging
from datetime import datetime
import traceback
from typing import Any, Dict, List, Optional

# Add project root to path
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from data_manager.data_loader import CaseDataLoader
from regression.exceptions import NoFittableModel
from regression.visualization import LeadTimeVisualizer
from utils.visualization import CovidVisualizer
from workflows.config import AnalysisConfig
from workflows.run_lead_analysis import run_lead_analysis

def setup_logging(output_dir: Path) -> logging.Logger:
    """
    Configure logging with both file and console handlers
    
    Parameters:
    -----------
    output_dir : Path
        Directory for log file
    
    Returns:
    --------
    logging.Logger
        Configured logger
    """
    log_dir = output_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"lead_time_{timestamp}.log"
    
    # Handlers go on the root logger so module loggers are captured too
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(
        logging.Formatter('%(message)s')
    )
    
    root.addHandler(file_handler)
    root.addHandler(console_handler)
    
    return logging.getLogger("lead_time_calculator")

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find the case-to-death lead offset that best explains COVID-19 deaths"
    )
    parser.add_argument('--input', required=True, help="CSV path or URL with daily counts")
    parser.add_argument('--region', required=True, help="Region to analyze")
    parser.add_argument('--max-lead', type=int, default=30, help="Largest offset searched (days)")
    parser.add_argument('--window', type=int, default=7, help="Moving-average window (days)")
    parser.add_argument('--date-degree', type=int, default=1, help="Polynomial degree of the date term")
    parser.add_argument('--start-date', default='2020-03-08', help="Date floor (YYYY-MM-DD)")
    parser.add_argument('--end-date', default=None, help="Date ceiling (YYYY-MM-DD)")
    parser.add_argument('--workers', type=int, default=None, help="Threads for the offset sweep")
    parser.add_argument('--cumulative', action='store_true', help="Input counts are running totals")
    parser.add_argument('--output-dir', type=Path, default=Path('results'), help="Output directory")
    parser.add_argument('--no-charts', action='store_true', help="Skip chart rendering")
    parser.add_argument('--progress', action='store_true', help="Show a progress bar")
    return parser.parse_args(argv)

def save_outputs(results: Dict[str, Any],
                 config: AnalysisConfig,
                 output_dir: Path,
                 charts: bool,
                 logger: logging.Logger) -> Dict[str, Path]:
    """Write result tables and charts to output_dir"""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        'fit_summary': output_dir / "fit_summary.csv",
        'coefficients': output_dir / "coefficients.csv",
        'comparison': output_dir / "comparison.csv"
    }
    for key, path in paths.items():
        results[key].to_csv(path, index=False)
        logger.info(f"Saved {key} to {path}")
        
    if charts:
        plotly_viz = LeadTimeVisualizer()
        best_offset = results['best_fit'].lead_offset
        paths['fit_quality_chart'] = plotly_viz.save(
            plotly_viz.plot_fit_quality(results['fit_summary'], best_offset, config.region),
            output_dir / "fit_quality.html"
        )
        paths['backtest_chart'] = plotly_viz.save(
            plotly_viz.plot_backtest(results['comparison'], best_offset, config.region),
            output_dir / "backtest.html"
        )
        
        static_viz = CovidVisualizer()
        paths['co_movement_chart'] = output_dir / "co_movement.png"
        static_viz.plot_co_movement(
            results['region_smoothed'],
            title=f"Smoothed cases and deaths - {config.region}",
            save_path=paths['co_movement_chart']
        )
        static_viz.close_all()
        
    return paths

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with configuration and setup"""
    args = parse_args(argv)
    logger = setup_logging(args.output_dir)
    
    try:
        config = AnalysisConfig.from_args(args)
        logger.info(f"Starting lead-time analysis with {config.to_dict()}")
        
        loader = CaseDataLoader()
        raw = loader.clean(
            loader.load_csv(args.input),
            start_date=config.start_date,
            end_date=config.end_date,
            cumulative=args.cumulative
        )
        
        results = run_lead_analysis(raw, config, logger)
        save_outputs(results, config, args.output_dir, not args.no_charts, logger)
        
        logger.info("Pipeline completed successfully")
        return 0
        
    except NoFittableModel as e:
        logger.error(f"No lead offset could be fitted: {str(e)}")
        return 2
        
    except Exception as e:
        logger.error(f"Pipeline failed: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        return 1
        
if __name__ == '__main__':
    sys.exit(main())
