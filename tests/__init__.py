"""Test suite for bucketpath."""
