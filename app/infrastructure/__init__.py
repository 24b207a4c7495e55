"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer. The catalog ships an in-memory
product store; a persistent store would live here as well.
"""
