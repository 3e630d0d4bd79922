"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from devconnector.broadcast import Broadcaster, InMemoryBroadcaster, PusherBroadcaster
from devconnector.config import get_settings
from devconnector.db import DocumentStore, InMemoryDocumentStore, SqlDocumentStore
from devconnector.github import GithubClient, RestGithubClient

_document_store: DocumentStore | None = None
_broadcaster: Broadcaster | None = None
_github_client: GithubClient | None = None


def get_document_store() -> DocumentStore:
    """
    Return a singleton store so in-memory documents persist across requests.
    """
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _document_store = InMemoryDocumentStore()
    else:
        _document_store = SqlDocumentStore(settings.database_url)
    return _document_store


def get_broadcaster() -> Broadcaster:
    global _broadcaster
    if _broadcaster:
        return _broadcaster

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.pusher_configured:
        _broadcaster = InMemoryBroadcaster()
    else:
        _broadcaster = PusherBroadcaster(
            app_id=settings.pusher_app_id,
            key=settings.pusher_key,
            secret=settings.pusher_secret,
            cluster=settings.pusher_cluster,
        )
    return _broadcaster


def get_github_client() -> GithubClient:
    global _github_client
    if _github_client:
        return _github_client

    settings = get_settings()
    _github_client = RestGithubClient(
        api_url=settings.github_api_url,
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
    )
    return _github_client
