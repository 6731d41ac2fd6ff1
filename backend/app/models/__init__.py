# app/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- Media: Uploaded media (thumbnail + video) with its view counter
- Comment: Comment left on a Media (append-only)
- Rating: Per-user rating of a Media (one per user)
"""
from .user import User, USER_ROLES
from .media import Media, Comment, Rating, AGE_RATINGS
