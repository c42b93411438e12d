"""
Observations: watch before you tune.
"""
