"""
Pydantic request/response contracts.

Schemas are kept apart from the ORM models: the models describe tables,
the schemas describe what the API accepts and which fields each endpoint
projects (for example, a video's owner is exposed as username/avatar/email
and never as the full user row).
"""
