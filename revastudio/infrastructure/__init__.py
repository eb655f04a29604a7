# Infrastructure layer - key-value database, repositories, remote storage
"""
Infrastructure layer contains:
- Key-value database backends
- Collection repositories
- Upload gateway clients

This layer depends on nothing above it.
"""
