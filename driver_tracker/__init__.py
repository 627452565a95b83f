"""
Driver Tracker

Income, expense, tax and savings tracking for a gig-economy driver.

Daily entries (hours, revenue, tips, orders, six expense categories) are
rolled up into Monday-start weeks and whole months, and each month is
turned into a net-income, tax and savings estimate.

DESIGN PRINCIPLES:
1. One JSON document is the single source of truth
2. Reads repair, they never fail
3. Bad input degrades to 0, it never blocks an entry
4. Storage back end is swappable
"""

from driver_tracker.tracker import DriverTracker, create_storage, create_tracker

__version__ = "1.0.0"

__all__ = ["DriverTracker", "create_storage", "create_tracker"]
