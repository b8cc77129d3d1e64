"""Error conditions raised by the lead-time regression"""

class InsufficientDataForOffset(ValueError):
    """An offset's dataset cannot support the linear model; the offset is skipped."""
    
    def __init__(self, lead_offset: int, reason: str):
        self.lead_offset = lead_offset
        self.reason = reason
        super().__init__(f"Offset {lead_offset}: {reason}")

class NoFittableModel(ValueError):
    """Every offset was skipped, so there is nothing to select or predict with."""

class DateRangeMismatch(UserWarning):
    """Prediction input only partially covers (or misses) the training dates."""
