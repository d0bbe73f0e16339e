"""Blob store adapters (video and image binaries)."""

from storage.blob_store import BlobStore, HttpBlobStore, LocalBlobStore, StoredBlob, build_blob_store

__all__ = ["BlobStore", "HttpBlobStore", "LocalBlobStore", "StoredBlob", "build_blob_store"]
