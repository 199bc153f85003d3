"""Core domain: models, frame model, decoding, encoding and conversion."""
