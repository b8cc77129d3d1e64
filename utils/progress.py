from typing import Optional
import logging
from tqdm import tqdm
import time

class ProgressMonitor:
    def __init__(self, total: int, desc: str = "Processing", 
                 logger: Optional[logging.Logger] = None,
                 disable: bool = False):
        """Initialize progress monitor with total steps and description"""
        self.logger = logger or logging.getLogger('progress')
        self.pbar = tqdm(total=total, desc=desc, disable=disable)
        self.total = total
        self.current = 0
        self.start_time = time.time()
        self.description = desc
        
    def update(self, n: int = 1):
        """Advance by n steps"""
        self.current += n
        self.pbar.update(n)
            
    def close(self):
        """Close progress bar and log elapsed time"""
        self.pbar.close()
        elapsed = time.time() - self.start_time
        self.logger.debug(
            f"{self.description}: {self.current}/{self.total} steps in {elapsed:.2f} seconds"
        )
        
    def __enter__(self):
        return self
        
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
