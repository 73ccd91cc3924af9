"""
Round-Trip Arbitrage Scanner.

Detects triangular and cross-pair conversion cycles in a single
exchange price snapshot and ranks them by theoretical yield.
"""

__version__ = "1.0.0"
__author__ = "Tim"
