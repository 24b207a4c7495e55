"""
Catalog bounded context: application layer.

Use cases orchestrating product listing, lookup, mutation and statistics.
"""
