"""
Object storage integration for videos and assessment files.

Backed by Cloudinary. Includes mock mode for local development without
credentials.
"""
