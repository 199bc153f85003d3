"""Web framework adapters for the frame push endpoints."""
