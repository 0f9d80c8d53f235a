"""Business logic for section operations."""

import logging
from typing import Any

from django.utils import timezone

from server.apps.assets.dto import CreateSectionDto
from server.apps.assets.exceptions import CommitNotFoundError
from server.apps.assets.infrastructure.hashing import section_hash
from server.apps.assets.infrastructure.repositories import (
    SectionRepository,
    get_section_repository,
)
from server.apps.assets.models import Commit, Section

# User type for Django's dynamic user model
_User = Any

_CONTRACT_FIELDS = ('contractor', 'contracted_at')

logger = logging.getLogger(__name__)


def resolve_hash(dto: CreateSectionDto) -> str:
    """Return the hash of a section descriptor, deriving it if missing.

    Args:
        dto: Section descriptor.

    Returns:
        Content hash.
    """
    if dto.hash:
        return dto.hash
    return section_hash(dto.origin_text, dto.desc)


def has_section(
    hash_value: str,
    *,
    sections: SectionRepository | None = None,
) -> Section | None:
    """Find an existing section by content hash.

    Args:
        hash_value: Content hash.
        sections: Section repository.

    Returns:
        Section instance or None if it does not exist.
    """
    sections = sections or get_section_repository()
    return sections.find_by_hash(hash_value)


def create_section(
    dto: CreateSectionDto,
    *,
    sections: SectionRepository | None = None,
) -> Section | None:
    """Create a section from a descriptor.

    Args:
        dto: Section descriptor.
        sections: Section repository.

    Returns:
        Created Section, or None if a section with the same hash
        was stored concurrently.
    """
    sections = sections or get_section_repository()
    hash_value = resolve_hash(dto)
    section = sections.create(hash_value, dto)
    if section is not None:
        logger.info('Section created: %s', hash_value)
    return section


def contract(
    section: Section,
    user: _User,
    *,
    sections: SectionRepository | None = None,
) -> Section:
    """Assign a section to a user.

    Args:
        section: Section to assign.
        user: Contractor.
        sections: Section repository.

    Returns:
        Updated Section.
    """
    sections = sections or get_section_repository()
    section.contractor = user
    section.contracted_at = timezone.now()
    sections.save(section, update_fields=_CONTRACT_FIELDS)
    logger.debug('Section %s contracted to user %s', section.hash, user.pk)
    return section


def verify_contractor(section: Section, user: _User) -> bool:
    """Check whether the user holds the contract of the section.

    Args:
        section: Section to check.
        user: User to verify.

    Returns:
        True if the user is the contractor.
    """
    return section.is_contracted_to(user.pk)


def release_contract(
    section: Section,
    *,
    sections: SectionRepository | None = None,
) -> Section:
    """Clear contract info so the section can be assigned again.

    Args:
        section: Section to release.
        sections: Section repository.

    Returns:
        Updated Section.
    """
    sections = sections or get_section_repository()
    section.contractor = None
    section.contracted_at = None
    sections.save(section, update_fields=_CONTRACT_FIELDS)
    logger.debug('Section %s released', section.hash)
    return section


def add_commit(
    section: Section,
    user: _User,
    text: str,
    *,
    sections: SectionRepository | None = None,
) -> Commit:
    """Submit a translation for a section.

    Args:
        section: Section being translated.
        user: Author of the translation.
        text: Translated text.
        sections: Section repository.

    Returns:
        Created Commit.
    """
    sections = sections or get_section_repository()
    commit = sections.create_commit(section, user, text)
    logger.info('Commit %d added to section %s', commit.pk, section.hash)
    return commit


def publish_commit(
    section: Section,
    commit_id: int,
    status: int | None = None,
    *,
    sections: SectionRepository | None = None,
) -> Section:
    """Mark a commit of the section as the canonical translation.

    Status only moves forward: a lower value than the current one is
    ignored.

    Args:
        section: Section owning the commit.
        commit_id: ID of the commit to publish.
        status: Optional new section status.
        sections: Section repository.

    Returns:
        Updated Section.

    Raises:
        CommitNotFoundError: If the commit is not one of the section's.
    """
    sections = sections or get_section_repository()
    commit = sections.find_commit(section, commit_id)
    if commit is None:
        logger.warning(
            'Cannot publish commit %d: not in section %s',
            commit_id,
            section.hash,
        )
        raise CommitNotFoundError(section.hash, commit_id)

    section.published_commit = commit
    update_fields = ['published_commit']
    if status is not None and status > section.status:
        section.status = status
        update_fields.append('status')
    sections.save(section, update_fields=update_fields)

    logger.info(
        'Commit %d published for section %s (status: %d)',
        commit_id,
        section.hash,
        section.status,
    )
    return section
