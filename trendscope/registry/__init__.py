"""
Registry Module.

Read-only lookups and collections built once at load time:
- Category Registry: category id -> display name per country
- Video Store: the parsed rows, partitioned by country
"""
