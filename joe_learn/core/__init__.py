"""
Core business logic for the Joe Learn catalog.

This module is framework-agnostic - it doesn't import FastAPI, Firestore,
or the storage SDK. The infrastructure layer adapts those to it.
"""
