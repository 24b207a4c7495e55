"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error handling, presentation and mapping
- Authentication and rate limiting
- Request context and logging configuration
- Error metrics
"""
