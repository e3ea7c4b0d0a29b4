"""Glucose insights engine.

Turns CGM glucose samples plus logged meals and insulin doses into
response curves, time-of-day statistics, ISF/ICR estimates, advisory
tips and short-term projected high/low alerts.
"""

__version__ = "0.1.0"
