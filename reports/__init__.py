"""
Reports Module

Formatters, threshold labelers and the rule-based query router that
answers questions about an analysis.
"""

__version__ = "0.1.0"
