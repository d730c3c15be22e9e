"""Derived-asset URL construction.

A derived asset is addressed as::

    <delivery_root>/so_<start>,eo_<end>,q_auto,f_mp4/<identifier>.mp4

Transformation parameters are always rendered in the order start offset, end
offset, quality, format; the remote store parses the segment positionally.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..storage.store_models import StoredAssetRef
from .cut_errors import InvalidCutRangeError
from .cut_models import CutSpec

OUTPUT_EXTENSION = "mp4"


def format_offset(seconds: float) -> str:
    """Render an offset as fixed-point seconds with two decimals."""
    # + 0.0 turns -0.0 into 0.0
    return f"{seconds + 0.0:.2f}"


@dataclass(frozen=True, slots=True)
class TransformationParams:
    start_offset: float
    end_offset: float
    quality: str = "auto"
    output_format: str = OUTPUT_EXTENSION

    def segment(self) -> str:
        return ",".join(
            (
                f"so_{format_offset(self.start_offset)}",
                f"eo_{format_offset(self.end_offset)}",
                f"q_{self.quality}",
                f"f_{self.output_format}",
            )
        )


def validate_cut(cut: CutSpec) -> None:
    """Raise :class:`InvalidCutRangeError` when ``cut`` cannot be composed."""
    if not (math.isfinite(cut.start) and math.isfinite(cut.end)):
        raise InvalidCutRangeError("Cut offsets must be finite numbers")
    if cut.start < 0:
        raise InvalidCutRangeError(
            f"Start offset {format_offset(cut.start)} must not be negative"
        )
    start, end = format_offset(cut.start), format_offset(cut.end)
    # Compare the rendered offsets: 4.999..5.001 collapses to 5.00..5.00.
    if cut.end <= cut.start or float(end) <= float(start):
        raise InvalidCutRangeError(
            f"End offset {end} must be greater than start offset {start}"
        )


def build_url(delivery_root: str, identifier: str, params: TransformationParams) -> str:
    return (
        f"{delivery_root.rstrip('/')}/{params.segment()}/"
        f"{identifier}.{params.output_format}"
    )


def compose_url(ref: StoredAssetRef, cut: CutSpec) -> str:
    """Return the retrieval URL of ``cut`` taken from the stored asset."""
    validate_cut(cut)
    params = TransformationParams(start_offset=cut.start, end_offset=cut.end)
    return build_url(ref.delivery_root, ref.identifier, params)


__all__ = [
    "TransformationParams",
    "build_url",
    "compose_url",
    "format_offset",
    "validate_cut",
]
