"""
Moorspeed - unattended Internet speed logging for vessels at anchor or in a marina.

This package samples the vessel position from a Signal K server, decides when the
vessel has been stationary long enough to be worth measuring, runs a throughput
measurement and submits the result to a remote collector.

Features:
- Stationarity detection over a rolling window of position fixes
- Minimum interval between measurements, with an optional test-on-move rule
- Background measurements that never block the position sampling loop
- Typed events for status, results and failures
"""

__version__ = "1.0.0"
