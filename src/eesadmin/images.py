"""Image URL resolution for floor maps and detection snapshots.

The backend serves its own copies of images under ``/floors`` and
``/images``; remote URLs stored on the entity are used only when the
local copy cannot be loaded.
"""

from __future__ import annotations

import dataclasses

from eesadmin.models.floor import MapImage
from eesadmin.models.record import Record


def floor_image_url(base_url: str, floor_id: str | None, map_image: MapImage | None) -> str | None:
    if not floor_id:
        return floor_image_fallback(map_image)
    return f"{base_url.rstrip('/')}/floors/{floor_id}.jpg"


def floor_image_fallback(map_image: MapImage | None) -> str | None:
    if map_image is None:
        return None
    return map_image.url or map_image.local_url or None


def record_image_url(base_url: str, record: Record | None) -> str | None:
    if record is None:
        return None
    if record.local_path:
        return f"{base_url.rstrip('/')}/images/{record.local_path.lstrip('/')}"
    return record.cloud_url or None


def record_image_fallback(record: Record | None) -> str | None:
    if record is None or not record.local_path:
        return None
    return record.cloud_url or None


@dataclasses.dataclass
class ImageSource:
    """A primary image URL with a one-shot fallback.

    Call :meth:`mark_failed` when the primary URL fails to load; ``url``
    then points at the fallback. A missing fallback keeps the primary.
    """

    primary: str | None
    fallback: str | None = None
    failed: bool = False

    @property
    def url(self) -> str | None:
        return self.fallback if self.failed else self.primary

    def mark_failed(self) -> str | None:
        if not self.failed and self.fallback:
            self.failed = True
        return self.url

    @classmethod
    def for_floor(cls, base_url: str, floor_id: str | None, map_image: MapImage | None) -> ImageSource:
        return cls(floor_image_url(base_url, floor_id, map_image), floor_image_fallback(map_image))

    @classmethod
    def for_record(cls, base_url: str, record: Record | None) -> ImageSource:
        return cls(record_image_url(base_url, record), record_image_fallback(record))
