"""
Catalog bounded context: interfaces layer.

FastAPI router, request/response schemas, response builders and
dependency wiring for the product catalog.
"""
