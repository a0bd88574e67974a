"""
PayRank - Source Package

Vendor payables prioritization: ranks outstanding vendor bills and
splits them into "approved for payment" and "held" around the cash
actually available.

DESIGN PRINCIPLES:
1. The ranking is recomputed on every read, never stored
2. A human decision (manual override) always wins over the score
3. The allocator is a pure function that cannot fail
4. Every change to what gets paid is auditable
"""

__version__ = "1.0.0"
__author__ = "PayRank Team"

# Configures structlog for every payrank module
from payrank.config import logging_config  # noqa: E402,F401
