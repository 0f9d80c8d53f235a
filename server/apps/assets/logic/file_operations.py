"""Business logic for file operations.

Every operation takes its repositories as keyword arguments and falls
back to the Django-backed ones. Loops here issue one query per section
and are not wrapped in a transaction: work done before a failure stays
persisted, and concurrent calls on the same file are not coordinated.
"""

import logging
from collections.abc import Iterable
from typing import Any

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from server.apps.assets.dto import CreateFileDto, CreateSectionDto
from server.apps.assets.exceptions import NoSpecifiedSectionError
from server.apps.assets.infrastructure.repositories import (
    FileRepository,
    SectionRepository,
    get_file_repository,
    get_section_repository,
)
from server.apps.assets.logic.section_operations import (
    contract,
    create_section,
    has_section,
    resolve_hash,
    verify_contractor,
)
from server.apps.assets.models import File, Section

# User type for Django's dynamic user model
_User = Any

_LAST_UPDATED_FIELD = 'last_updated'

logger = logging.getLogger(__name__)


def _load_section(hash_value: str, sections: SectionRepository) -> Section:
    """Resolve a hash listed by a file.

    Args:
        hash_value: Section hash from ``File.sections``.
        sections: Section repository.

    Returns:
        Section instance.

    Raises:
        NoSpecifiedSectionError: If no section has this hash.
    """
    section = sections.find_by_hash(hash_value)
    if section is None:
        logger.error('File references missing section: %s', hash_value)
        raise NoSpecifiedSectionError(hash_value)
    return section


def create_file(
    dto: CreateFileDto,
    *,
    files: FileRepository | None = None,
) -> File | None:
    """Create a file or refresh the existing one with the same name.

    Args:
        dto: File descriptor.
        files: File repository.

    Returns:
        Saved File instance, or None if saving failed
        (e.g. another request created the same name first).
    """
    files = files or get_file_repository()

    file_instance = files.find_by_name(dto.name)
    update_fields: list[str] | None = [
        _LAST_UPDATED_FIELD,
        'assets_path',
    ]
    if file_instance is None:
        file_instance = files.new(dto)
        update_fields = None
    file_instance.last_updated = timezone.now()
    file_instance.assets_path = dto.assets_path

    try:
        with transaction.atomic():
            files.save(file_instance, update_fields=update_fields)
    except IntegrityError:
        logger.exception('Failed to save file: %s', dto.name)
        return None

    logger.info(
        'File saved: %s (ID: %d, path: %s)',
        file_instance.name,
        file_instance.pk,
        file_instance.assets_path,
    )
    return file_instance


def get_file_by_name(name: str) -> File:
    """Get file by its unique name.

    Args:
        name: File name.

    Returns:
        File instance.

    Raises:
        File.DoesNotExist: If file not found.
    """
    return File.objects.get(name=name)


def file_exists(name: str) -> bool:
    """Check if a file with the given name exists."""
    return File.objects.filter(name=name).exists()


def get_published_text(
    file_instance: File,
    *,
    sections: SectionRepository | None = None,
) -> list[str]:
    """Collect published translations of the file in section order.

    Sections without a published commit, or whose published commit is
    not one of their own, are skipped.

    Args:
        file_instance: File to read.
        sections: Section repository.

    Returns:
        Texts of the published commits.

    Raises:
        NoSpecifiedSectionError: If a listed hash has no section.
    """
    sections = sections or get_section_repository()

    texts = []
    for hash_value in file_instance.sections:
        section = _load_section(hash_value, sections)
        if section.published_commit_id is None:
            continue
        commit = sections.find_commit(section, section.published_commit_id)
        if commit is not None:
            texts.append(commit.text)
    return texts


def merge_sections(
    file_instance: File,
    candidates: Iterable[CreateSectionDto],
    *,
    files: FileRepository | None = None,
    sections: SectionRepository | None = None,
) -> int | None:
    """Merge candidate sections into a file, deduplicating by content hash.

    New hashes create a Section; known hashes reuse the stored one and
    are only appended when the file does not list them yet. Each added
    section bumps the progress counters according to its status and
    gets the file recorded as a parent.

    Known race: two merges into the same file at once may both append
    the same hash or lose counter updates.

    Args:
        file_instance: Saved file to merge into.
        candidates: Section descriptors, processed in order.
        files: File repository.
        sections: Section repository.

    Returns:
        Number of sections added to the file, or None if a section
        could not be created. Sections linked before the failure
        are not rolled back.
    """
    files = files or get_file_repository()
    sections = sections or get_section_repository()

    file_instance.last_updated = timezone.now()
    added_count = 0

    for dto in candidates:
        hash_value = resolve_hash(dto)

        section = has_section(hash_value, sections=sections)
        if section is None:
            section = create_section(
                CreateSectionDto(
                    origin_text=dto.origin_text,
                    desc=dto.desc,
                    hash=hash_value,
                    status=dto.status,
                ),
                sections=sections,
            )
            if section is None:
                logger.warning(
                    'Merge into %s aborted: section %s could not be created',
                    file_instance.name,
                    hash_value,
                )
                return None
            should_add = True
        else:
            should_add = not file_instance.has_section_hash(hash_value)

        if should_add:
            file_instance.sections.append(section.hash)
            file_instance.count_section(section.status)
            added_count += 1
            # Keep the back-reference in sync
            sections.add_parent(section, file_instance)

    files.save(file_instance, update_fields=[
        'sections',
        'translated',
        'corrected',
        'polished',
        _LAST_UPDATED_FIELD,
    ])

    logger.info(
        'Merged %d sections into file %s (total: %d)',
        added_count,
        file_instance.name,
        len(file_instance.sections),
    )
    return added_count


def contract_sections(
    file_instance: File,
    user: _User,
    count: int,
    *,
    files: FileRepository | None = None,
    sections: SectionRepository | None = None,
) -> File:
    """Assign up to ``count`` free sections of the file to a user.

    Sections are taken in file order; already contracted ones are
    skipped. The number actually assigned is added to the user's
    contractor entry for this file.

    Args:
        file_instance: File to take sections from.
        user: Contractor.
        count: Maximum number of sections to assign.
        files: File repository.
        sections: Section repository.

    Returns:
        Updated File instance.

    Raises:
        NoSpecifiedSectionError: If a listed hash has no section.
    """
    files = files or get_file_repository()
    sections = sections or get_section_repository()

    remaining = count
    assigned = 0
    for hash_value in file_instance.sections:
        if remaining <= 0:
            break
        section = _load_section(hash_value, sections)
        if not section.has_contract():
            contract(section, user, sections=sections)
            remaining -= 1
            assigned += 1

    contractor = files.add_contracted(file_instance, user, assigned)
    file_instance.last_updated = timezone.now()
    files.save(file_instance, update_fields=[_LAST_UPDATED_FIELD])

    logger.info(
        'Contracted %d sections of %s to user %s (total: %d)',
        assigned,
        file_instance.name,
        user.pk,
        contractor.count,
    )
    return file_instance


def get_contracted_sections(
    file_instance: File,
    user: _User,
    *,
    sections: SectionRepository | None = None,
) -> list[Section]:
    """List sections of the file contracted to a user.

    Already translated sections are included as well.

    Args:
        file_instance: File to scan.
        user: Contractor.
        sections: Section repository.

    Returns:
        Contracted sections in file order.

    Raises:
        NoSpecifiedSectionError: If a listed hash has no section.
    """
    sections = sections or get_section_repository()

    contracted = []
    for hash_value in file_instance.sections:
        section = _load_section(hash_value, sections)
        if verify_contractor(section, user):
            contracted.append(section)
    return contracted


def get_sections(
    file_instance: File,
    start: int = 0,
    count: int | None = None,
    *,
    sections: SectionRepository | None = None,
) -> list[Section]:
    """Read a page of the file's sections.

    The file's own hash list is left untouched.

    Args:
        file_instance: File to read.
        start: Offset of the first section.
        count: Page size. None uses ``ASSETS_DEFAULT_PAGE_SIZE``;
            0 reads to the end.
        sections: Section repository.

    Returns:
        Sections in file order.

    Raises:
        ValueError: If start or count is negative.
        NoSpecifiedSectionError: If a selected hash has no section.
    """
    sections = sections or get_section_repository()

    if count is None:
        count = settings.ASSETS_DEFAULT_PAGE_SIZE
    if start < 0 or count < 0:
        raise ValueError('start and count must not be negative')

    if count:
        page = file_instance.sections[start:start + count]
    else:
        page = file_instance.sections[start:]

    return [_load_section(hash_value, sections) for hash_value in page]
