"""
Inkpress Backend - Application Package
=======================================

What: A minimal blogging API (accounts, cookie sessions, posts with cover images).
Who:  Imported by uvicorn (inkpress.main:app), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │     Routes + Dependencies (HTTP)    │  ← status codes, cookies, forms
    ├─────────────────────────────────────┤
    │        Services (Business rules)    │  ← users, tokens, uploads, posts
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

Configuration flows top-down: create_app(settings) builds every component
from one Settings object and hangs it on app.state.
"""

__version__ = "1.0.0"
