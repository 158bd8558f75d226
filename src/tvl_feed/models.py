"""Data models shared by the price feed and its consumers.

Prices are fixed-point ints scaled by ``10**decimals``. Never use float for them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Observation:
    """One polled value of the tracked metric."""

    timestamp: int  # Unix seconds
    value: int  # fixed-point
