"""Repositories wrapping the Django ORM for files and sections.

Business logic receives these objects instead of touching model managers
directly, so tests can hand in their own implementations.
"""

import logging
from collections.abc import Sequence
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q

from server.apps.assets.dto import CreateFileDto, CreateSectionDto
from server.apps.assets.models import (
    Commit,
    Contractor,
    File,
    Section,
    SectionStatus,
)

# User type for Django's dynamic user model
_User = Any

_COUNT_FIELD = 'count'
_ID_FIELD = 'id'

logger = logging.getLogger(__name__)


class FileRepository:
    """Storage access for File records."""

    def find_by_name(self, name: str) -> File | None:
        """Load file by its unique name.

        Args:
            name: File name.

        Returns:
            File instance or None if not found.
        """
        return File.objects.filter(name=name).first()

    def new(self, dto: CreateFileDto) -> File:
        """Build an unsaved File from a descriptor.

        Args:
            dto: File descriptor.

        Returns:
            New File instance (not persisted).
        """
        return File(
            name=dto.name,
            assets_path=dto.assets_path,
            type=dto.type,
        )

    def save(
        self,
        file_instance: File,
        update_fields: Sequence[str] | None = None,
    ) -> None:
        """Persist a file.

        Args:
            file_instance: File to save.
            update_fields: Columns to write; None writes the whole row.

        Raises:
            IntegrityError: If the name is already taken.
        """
        file_instance.save(update_fields=update_fields)

    def add_contracted(
        self,
        file_instance: File,
        user: _User,
        amount: int,
    ) -> Contractor:
        """Atomically add assigned sections to a user's running total.

        Creates the contractor entry on first assignment.

        Args:
            file_instance: File the sections belong to.
            user: Contracted user.
            amount: Number of newly assigned sections.

        Returns:
            Contractor entry with the updated total.
        """
        with transaction.atomic():
            updated = Contractor.objects.filter(
                file=file_instance,
                user=user,
            ).update(count=F(_COUNT_FIELD) + amount)

            if updated == 0:
                # First assignment for this user
                return Contractor.objects.create(
                    file=file_instance,
                    user=user,
                    count=amount,
                )

        return Contractor.objects.get(file=file_instance, user=user)


class SectionRepository:
    """Storage access for Section records."""

    def find_by_hash(self, section_hash: str) -> Section | None:
        """Load section by its content hash.

        Args:
            section_hash: Content hash.

        Returns:
            Section instance or None if not found.
        """
        return Section.objects.filter(hash=section_hash).first()

    def create(self, section_hash: str, dto: CreateSectionDto) -> Section | None:
        """Create a section with the given hash.

        The insert runs in its own savepoint so a duplicate key does not
        break an outer transaction.

        Args:
            section_hash: Content hash for the new section.
            dto: Section descriptor.

        Returns:
            Created Section, or None if the hash already exists.
        """
        try:
            with transaction.atomic():
                return Section.objects.create(
                    hash=section_hash,
                    origin_text=dto.origin_text,
                    desc=dto.desc,
                    status=dto.status,
                )
        except IntegrityError:
            logger.exception('Failed to create section: %s', section_hash)
            return None

    def save(self, section: Section, update_fields: Sequence[str]) -> None:
        """Persist changed columns of a section.

        Args:
            section: Section to save.
            update_fields: Columns to write.
        """
        section.save(update_fields=update_fields)

    def count_progress(self, hashes: list[str]) -> dict[str, int]:
        """Count stored sections by status threshold.

        Args:
            hashes: Section hashes to look at.

        Returns:
            Mapping with keys found, translated, corrected and polished.
        """
        return Section.objects.filter(hash__in=hashes).aggregate(
            found=Count(_ID_FIELD),
            translated=Count(
                _ID_FIELD,
                filter=Q(status__gte=SectionStatus.TRANSLATED),
            ),
            corrected=Count(
                _ID_FIELD,
                filter=Q(status__gte=SectionStatus.CORRECTED),
            ),
            polished=Count(
                _ID_FIELD,
                filter=Q(status__gte=SectionStatus.POLISHED),
            ),
        )

    def add_parent(self, section: Section, file_instance: File) -> None:
        """Record that a file contains the section.

        Args:
            section: Section being linked.
            file_instance: Owning file (must be saved).
        """
        section.parents.add(file_instance)

    def find_commit(self, section: Section, commit_id: int) -> Commit | None:
        """Look up a commit inside the section's own commits.

        Args:
            section: Section to search.
            commit_id: Commit primary key.

        Returns:
            Commit instance or None if the section has no such commit.
        """
        return section.commits.filter(id=commit_id).first()

    def create_commit(self, section: Section, user: _User, text: str) -> Commit:
        """Add a translation commit to a section.

        Args:
            section: Section being translated.
            user: Author of the commit (may be None).
            text: Translated text.

        Returns:
            Created Commit.
        """
        return Commit.objects.create(section=section, user=user, text=text)


def get_file_repository() -> FileRepository:
    """Get the default file repository.

    Returns:
        FileRepository backed by the Django ORM.
    """
    return FileRepository()


def get_section_repository() -> SectionRepository:
    """Get the default section repository.

    Returns:
        SectionRepository backed by the Django ORM.
    """
    return SectionRepository()
