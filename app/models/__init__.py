# Models package
from .contract import Contract
from .rate_band import RateBand

__all__ = ["Contract", "RateBand"]
