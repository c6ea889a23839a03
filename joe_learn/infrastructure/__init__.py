"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- firestore: Metadata persistence
- storage: Object storage (Cloudinary)

These wrappers translate between external formats and our domain models.
"""
