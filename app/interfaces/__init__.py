"""
Interfaces layer package.

Contains FastAPI routers, Pydantic request/response schemas,
and response envelope builders. No business logic belongs here.
Routes call use cases and return responses.
"""
