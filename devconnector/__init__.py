"""
DevConnector API package.

A FastAPI service for developer profiles and posts, backed by a document
store with in-memory and SQLAlchemy implementations.
"""
