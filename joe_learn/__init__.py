"""
Joe Learn API - upload broker for educational videos and assessments.

This package contains the complete application:
- core: Framework-agnostic catalog models and upload signing
- infrastructure: Firestore and Cloudinary integrations
- api: FastAPI routes and dependencies
- config: Application configuration and credential loading
"""

__version__ = "0.1.0"
