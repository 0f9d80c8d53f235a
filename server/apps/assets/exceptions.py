"""Exceptions for assets app."""

from typing import Final

NO_SPECIFIED_SECTION: Final = 'NO_SPECIFIED_SECTION'


class AssetsError(Exception):
    """Base class for translation assets errors."""


class NoSpecifiedSectionError(AssetsError):
    """Raised when a file lists a section hash that has no Section record.

    Files must never reference missing sections, so this signals broken
    data rather than a user error.
    """

    code: Final = NO_SPECIFIED_SECTION

    def __init__(self, section_hash: str) -> None:
        """Initialize NoSpecifiedSectionError.

        Args:
            section_hash: Hash that failed to resolve.
        """
        self.section_hash = section_hash
        super().__init__(f'{NO_SPECIFIED_SECTION}: {section_hash}')


class CommitNotFoundError(AssetsError):
    """Raised when a commit does not belong to the section."""

    def __init__(self, section_hash: str, commit_id: int) -> None:
        """Initialize CommitNotFoundError.

        Args:
            section_hash: Hash of the section that was searched.
            commit_id: Commit ID that was not found.
        """
        self.section_hash = section_hash
        self.commit_id = commit_id
        super().__init__(
            f'Commit {commit_id} not found in section {section_hash}',
        )
