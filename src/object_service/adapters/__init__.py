"""Adapters – MongoDB persistence and the FastAPI HTTP surface."""
