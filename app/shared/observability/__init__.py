"""
Observability package.

Diagnostic-only state (error metrics). Nothing here may influence how a
request is handled.
"""
