"""Environmental Monitor.

Console monitor for global seismic activity and local lightning risk.
"""

__version__ = "1.0.0"
