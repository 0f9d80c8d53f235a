"""Business logic for file progress counters."""

import logging

from server.apps.assets.infrastructure.repositories import (
    FileRepository,
    SectionRepository,
    get_file_repository,
    get_section_repository,
)
from server.apps.assets.models import File

_PROGRESS_FIELDS = ('translated', 'corrected', 'polished')

logger = logging.getLogger(__name__)


def recalculate_progress(
    file_instance: File,
    *,
    files: FileRepository | None = None,
    sections: SectionRepository | None = None,
) -> File:
    """Recalculate progress counters from current section status.

    Counters are normally bumped only when a section joins the file,
    so they drift once sections get translated. This refreshes them.

    Args:
        file_instance: File to recalculate.
        files: File repository.
        sections: Section repository.

    Returns:
        Updated File instance.
    """
    files = files or get_file_repository()
    sections = sections or get_section_repository()

    totals = sections.count_progress(file_instance.sections)

    expected = len(set(file_instance.sections))
    if totals['found'] != expected:
        logger.warning(
            'File %s lists %d sections but %d exist',
            file_instance.name,
            expected,
            totals['found'],
        )

    old_progress = (
        file_instance.translated,
        file_instance.corrected,
        file_instance.polished,
    )
    file_instance.translated = totals['translated']
    file_instance.corrected = totals['corrected']
    file_instance.polished = totals['polished']
    files.save(file_instance, update_fields=_PROGRESS_FIELDS)

    logger.info(
        'Recalculated progress for file %s: %s -> %s',
        file_instance.name,
        old_progress,
        (
            file_instance.translated,
            file_instance.corrected,
            file_instance.polished,
        ),
    )
    return file_instance
