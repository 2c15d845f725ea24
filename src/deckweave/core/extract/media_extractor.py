from __future__ import annotations

import re
import uuid
from pathlib import Path, PurePosixPath
from typing import Iterable

from deckweave.core.extract.container import Container
from deckweave.core.logging import get_logger
from deckweave.core.models import ExtractedImage

logger = get_logger(__name__)

MEDIA_PART = re.compile(r"^ppt/media/.+\.(png|jpg|jpeg|gif|emf|wmf)$", re.IGNORECASE)


class MediaExtractor:
    """Copies template images to `<images_dir>/<uuid>_<name>`.

    Files written here are owned by the extractor and live until `cleanup`
    is called with their ids.
    """

    def __init__(self, images_dir: Path) -> None:
        self.images_dir = Path(images_dir)

    def extract(self, container: Container, template_name: str = "") -> list[ExtractedImage]:
        """Best-effort: a bad image is skipped, a failed batch yields []."""
        source = template_name or container.name
        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
            media_parts = container.list_parts(MEDIA_PART)
            logger.info("media_parts_found", template=source, count=len(media_parts))

            images: list[ExtractedImage] = []
            for part in media_parts:
                try:
                    img = self._extract_one(container, part, source)
                except Exception as e:
                    logger.warning("image_extraction_failed", part=part, error=str(e))
                    continue
                if img is not None:
                    images.append(img)
        except Exception as e:
            logger.warning("media_extraction_failed", template=source, error=str(e))
            return []

        logger.info("media_extracted", template=source, count=len(images))
        return images

    def _extract_one(self, container: Container, part: str, source: str) -> ExtractedImage | None:
        blob = container.get_part(part)
        if blob is None:
            return None

        file_name = PurePosixPath(part).name
        file_type = PurePosixPath(file_name).suffix.lstrip(".").lower()
        image_id = str(uuid.uuid4())
        out_path = self.images_dir / f"{image_id}_{file_name}"
        out_path.write_bytes(blob)

        logger.debug("image_extracted", name=file_name, file_type=file_type, bytes=len(blob))
        return ExtractedImage(
            id=image_id,
            original_name=file_name,
            file_path=str(out_path),
            file_type=file_type,
            slide_context="template",
            description=f"Extracted from {Path(source).name}" if source else None,
        )

    def cleanup(self, image_ids: Iterable[str]) -> int:
        """Delete extracted files whose name starts with '<id>_'. Returns the count removed."""
        removed = 0
        if not self.images_dir.is_dir():
            return removed
        for image_id in image_ids:
            # literal prefix, not a glob pattern
            prefix = f"{image_id}_"
            for path in sorted(p for p in self.images_dir.iterdir() if p.name.startswith(prefix)):
                try:
                    path.unlink()
                except OSError as e:
                    logger.error("image_cleanup_failed", path=str(path), error=str(e))
                    continue
                removed += 1
                logger.info("image_cleaned_up", file=path.name)
        return removed
