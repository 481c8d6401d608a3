"""Segmentation layer: split answer text into text and math segments."""

from .segmenter import Segmenter, segment, normalize, reconstruct, build_pattern

__all__ = ["Segmenter", "segment", "normalize", "reconstruct", "build_pattern"]
