"""
Analysis Engine Module

Turns a date-ordered price series into derived indicators:
- Stock span (monotonic stack)
- Simple moving averages over several windows
- Pipeline assembly into one AnalysisResult
- Summary figures and insights
"""

__version__ = "0.1.0"
