"""Loading the service-area gazetteer used for location scoring."""

from __future__ import annotations

from pathlib import Path

from ..domain.service_areas import ServiceArea, build_service_areas
from ..exceptions import ServiceAreaFileNotFoundError
from ..infrastructure.io.validation import parse_service_areas
from ..observability import get_logger
from ..protocols import FileSystem


def load_service_areas(*, path: Path | None, fs: FileSystem) -> tuple[ServiceArea, ...]:
    """Load gazetteer entries; an unset path means no area lookup."""
    if path is None:
        return tuple()
    if not fs.exists(path):
        raise ServiceAreaFileNotFoundError(str(path))

    areas = build_service_areas(parse_service_areas(fs.read_json(path)))
    get_logger("eventpros_matching.service_areas").info(
        "Loaded %s service areas from %s", len(areas), path
    )
    return areas
