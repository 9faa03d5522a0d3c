"""
Line-item calculation engine.

Pure Python math. Given the raw fields of a scope line (dimensions,
materials, quantities), produce the derived area, rate and amount that the
totals engine sums up.
"""
