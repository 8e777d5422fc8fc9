"""
MovieLibrary Backend: Application Package Initializer
======================================================

What: Marks the `movielibrary` directory as a Python package.
Who:  Imported by uvicorn (`movielibrary.main:app`), Alembic and pytest.

Architecture Note:
    The backend is layered the same way on both resources (movies, rentals):

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Command Handlers)     │  ← validate, orchestrate, map outcomes
    │     Rental Lifecycle Engine         │  ← Active → Returned, billing
    ├─────────────────────────────────────┤
    │     Repositories (Versioned)        │  ← optimistic concurrency on update
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the database directly, and services never see a
    SQLAlchemy row: repositories hand out frozen record snapshots.
"""

__version__ = "1.0.0"
