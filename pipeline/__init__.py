"""
Pipeline Module

Configuration loading and analysis sessions.
"""

__version__ = "0.1.0"
