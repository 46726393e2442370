"""
Sentiment Module

Synthetic per-day social sentiment and its correlation with stock span.
"""

__version__ = "0.1.0"
