"""
Shop-floor kernel: persistence, selectors, exceptions, clock and logging
for work orders imported from CAD cut-list exports.
"""

__version__ = "0.1.0"
