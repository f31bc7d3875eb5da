"""
Fair Slot Schedule Search

This package searches for the fairest multi-round league schedule:
- Round-robin partitioning of all team pairings into rounds
- Exhaustive enumeration of valid slot orderings per round
- Weighted unfairness scoring with early-exit pruning
- Exhaustive and multi-process search over every per-round combination
"""

__version__ = "0.1.0"
__author__ = "Fair Scheduler Project Team"
