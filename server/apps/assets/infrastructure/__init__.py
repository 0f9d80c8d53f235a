"""Infrastructure layer for assets app.

This package contains the pieces that talk to storage:
- Content hashing of section text
- Repositories wrapping the Django ORM

Keep infrastructure concerns separate from business logic.
"""
