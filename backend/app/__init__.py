"""
VideoTube Backend - Application Package
=========================================

REST backend for a video-sharing platform.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP only: params, status codes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← id checks, owner checks, queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
