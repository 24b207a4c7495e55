"""
Shared error handling package.

Centralizes error-to-HTTP mapping so that every failure, whether a
catalog error or a foreign exception, reaches the client as the same
structured error envelope and is recorded in the error metrics.
"""
