"""Aggregation package."""

from driver_tracker.aggregation.aggregator import Aggregator, sum_records

__all__ = ["Aggregator", "sum_records"]
