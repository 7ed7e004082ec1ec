"""Pydantic schemas for the public API and upstream payloads."""
