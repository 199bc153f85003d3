"""Decoders producing metric records from raw batches."""

from lineframes.core.decoding.line_protocol import LineProtocolDecoder

__all__ = ["LineProtocolDecoder"]
