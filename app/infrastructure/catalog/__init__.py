"""
Catalog bounded context: infrastructure layer.

Contains adapters implementing the catalog domain ports.
"""
