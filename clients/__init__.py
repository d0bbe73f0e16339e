"""
StreamHub API Clients.

Provides session-aware access to the StreamHub HTTP API.
"""

from .streamhub_client import ApiClientError, SessionExpiredError, StreamHubClient

__all__ = ["ApiClientError", "SessionExpiredError", "StreamHubClient"]
