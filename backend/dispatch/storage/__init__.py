"""Object storage access."""

from dispatch.storage.blob_fetcher import BlobFetcher, LocalBlobFetcher, StorageLocation, parse_storage_url

__all__ = ["BlobFetcher", "LocalBlobFetcher", "StorageLocation", "parse_storage_url"]
