"""
Postboard — Application Package
=================================

Social posting backend: users publish posts, comment on them, like them and
file them under categories, behind bearer-token authentication.

    ┌─────────────────────────────────────┐
    │   Routes + guards (API Layer)       │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Business Logic)         │  ← ownership, population, likes
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (Persistence)            │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
