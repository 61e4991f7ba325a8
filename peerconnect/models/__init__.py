"""
Models

- domain: storage-agnostic dataclasses used by services and repositories
- api: Pydantic schemas for the HTTP layer
"""
