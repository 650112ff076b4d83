"""
Utility modules for TrendScope.

Cross-cutting concerns:
- Storage: dataset file I/O and view model export
- Tags: tag string normalization and filler filtering
- Countries: display names for country codes
"""
