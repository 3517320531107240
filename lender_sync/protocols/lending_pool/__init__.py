"""Lending pool payload decoding, unit conversion and yield model."""
from .parser import parse_allowance, parse_lender_info, unwrap_simulation_result
from .yield_model import build_pool_statistics

__all__ = [
    "build_pool_statistics",
    "parse_allowance",
    "parse_lender_info",
    "unwrap_simulation_result",
]
