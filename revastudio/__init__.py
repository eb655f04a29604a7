"""Reva Studio photo storage backend."""
