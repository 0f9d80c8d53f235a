"""Database models for assets app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_ASSETS_PATH_MAX_LENGTH: Final = 1024
_HASH_MAX_LENGTH: Final = 64  # Room for SHA256 hex; MD5 uses 32


class SectionStatus(models.IntegerChoices):
    """Translation progress level of a section."""

    NEW = 0, 'New'
    TRANSLATED = 1, 'Translated'
    CORRECTED = 2, 'Corrected'
    POLISHED = 3, 'Polished'


@final
class File(models.Model):
    """Translatable file made of content-hashed sections.

    ``sections`` keeps the ordered list of section hashes. The progress
    counters mirror the status each section had when it was added to the
    file; they are not refreshed when a section changes afterwards
    (see ``recalculate_progress``).
    """

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        unique=True,
    )

    assets_path = models.CharField(
        max_length=_ASSETS_PATH_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Location of the backing asset',
    )

    type = models.IntegerField(
        default=0,
        help_text='Classification tag of the file',
    )

    last_updated = models.DateTimeField(
        null=True,
        blank=True,
        default=None,
    )

    # Progress counters (cached from section status)
    translated = models.PositiveIntegerField(default=0)
    corrected = models.PositiveIntegerField(default=0)
    polished = models.PositiveIntegerField(default=0)

    sections = models.JSONField(
        default=list,
        blank=True,
        help_text='Ordered list of section content hashes',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['name']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.name

    def has_section_hash(self, section_hash: str) -> bool:
        """Check whether the file already lists a section hash.

        Args:
            section_hash: Content hash of the section.

        Returns:
            True if the hash is in ``sections``.
        """
        return section_hash in self.sections

    def count_section(self, status: int) -> None:
        """Bump progress counters for a section with the given status.

        Args:
            status: Section status at the moment it joins the file.
        """
        if status >= SectionStatus.TRANSLATED:
            self.translated += 1
        if status >= SectionStatus.CORRECTED:
            self.corrected += 1
        if status >= SectionStatus.POLISHED:
            self.polished += 1


@final
class Contractor(models.Model):
    """Number of sections of a file assigned to a user."""

    file = models.ForeignKey(
        File,
        on_delete=models.CASCADE,
        related_name='contractors',
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='contracted_files',
        db_index=True,
    )

    count = models.PositiveIntegerField(
        default=0,
        help_text='Total sections assigned to the user from this file',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'Contractor'  # type: ignore[mutable-override]
        verbose_name_plural = 'Contractors'  # type: ignore[mutable-override]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            # One running total per user and file
            models.UniqueConstraint(
                fields=['file', 'user'],
                name='contractors_file_user_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}@{self.file.name}: {self.count}'


@final
class Section(models.Model):
    """Unit of original text identified by its content hash.

    A section is stored once per hash and shared by every file that
    contains the same text. Translations are kept as commits, one of
    which may be published.
    """

    hash = models.CharField(
        max_length=_HASH_MAX_LENGTH,
        unique=True,
        help_text='Content hash, MD5 of origin text and description by default',
    )

    origin_text = models.TextField()

    desc = models.TextField(
        blank=True,
        default='',
    )

    status = models.PositiveSmallIntegerField(
        choices=SectionStatus.choices,
        default=SectionStatus.NEW,
    )

    published_commit = models.ForeignKey(
        'Commit',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text='Commit currently used as the canonical translation',
    )

    parents = models.ManyToManyField(
        File,
        related_name='linked_sections',
        blank=True,
    )

    # Contract info
    contractor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='contracted_sections',
    )

    contracted_at = models.DateTimeField(
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Section'  # type: ignore[mutable-override]
        verbose_name_plural = 'Sections'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['created_at', 'id']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.hash

    def has_contract(self) -> bool:
        """Check whether the section is assigned to anyone."""
        return self.contractor_id is not None

    def is_contracted_to(self, user_id: int) -> bool:
        """Check whether the section is assigned to the given user.

        Args:
            user_id: Primary key of the user.

        Returns:
            True if the user holds the contract.
        """
        return self.contractor_id is not None and self.contractor_id == user_id


@final
class Commit(models.Model):
    """One translation submission for a section."""

    section = models.ForeignKey(
        Section,
        on_delete=models.CASCADE,
        related_name='commits',
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='commits',
    )

    text = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Commit'  # type: ignore[mutable-override]
        verbose_name_plural = 'Commits'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['created_at', 'id']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.section.hash}#{self.pk}'
