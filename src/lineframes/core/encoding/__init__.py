"""Encoders for frames."""

from lineframes.core.encoding.frame_json import (
    encode_frame,
    encode_frames,
    frame_to_dict,
)

__all__ = ["encode_frame", "encode_frames", "frame_to_dict"]
