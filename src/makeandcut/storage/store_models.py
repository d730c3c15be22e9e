"""Data structures returned by remote store adapters."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StoredAssetRef:
    """Remote store acknowledgement for one uploaded video.

    ``identifier`` is assigned by the store and treated as opaque.
    ``delivery_root`` is the URL prefix derived assets are resolved under.
    """

    identifier: str
    url: str
    delivery_root: str
    size_bytes: int | None = None
    format: str | None = None
    duration: float | None = None
