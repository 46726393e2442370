"""
Data Ingestion Module

Turns uploaded or generated price data into canonical bars:
- CSV files (Date,Open,High,Low,Close,Volume)
- Synthetic sample series for demos
"""

__version__ = "0.1.0"
