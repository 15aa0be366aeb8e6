"""Imaging package - checkpoint image export."""

from imaging.export import CheckpointExporter, resolve_image_format, snapshot_to_image

__all__ = [
    'CheckpointExporter',
    'resolve_image_format',
    'snapshot_to_image',
]
