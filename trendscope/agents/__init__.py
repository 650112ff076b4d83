"""
Ingestion stages for TrendScope.

Contains the modules that turn raw dataset files into typed rows:
- Record Parser (CSV text -> TrendingVideo rows)
"""
