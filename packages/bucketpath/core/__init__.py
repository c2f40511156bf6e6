"""bucketpath core: Cloud Storage path resolution with per-bucket filesystem caching."""
