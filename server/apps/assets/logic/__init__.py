"""Business logic layer for assets app.

This package contains all business logic for translation assets:
- File upsert, lookup and section listing
- Section dedup/merge by content hash
- Contract assignment and progress counters

All business logic should be implemented here, separate from
models (data layer) and infrastructure (repositories, hashing).
"""
