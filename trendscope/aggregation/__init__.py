"""
Aggregation Module.

Reduces the loaded rows into chart view models:
- Aggregation Engine: one operation per chart
- Tag trends: racing, evolution and tag/category pairs
- Flow Graph Builder: Sankey nodes and links
"""
