"""
Firestore integration for video and assessment metadata.

Includes an in-memory mock for local development without a Firebase project.
"""
