"""
Catalog bounded context: domain layer.

This module contains all domain logic for the product catalog:
- Product entities and query value objects
- Query processing (parse, validate, filter, search, sort, paginate)
- Aggregate statistics
- The error taxonomy shared by every layer
"""
