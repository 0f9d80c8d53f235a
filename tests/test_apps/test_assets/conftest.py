"""Shared fixtures for assets app tests."""

import pytest
from django.contrib.auth import get_user_model

from server.apps.assets.dto import CreateSectionDto
from server.apps.assets.infrastructure.hashing import section_hash
from server.apps.assets.models import File, Section

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for contract isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def file_instance(db):
    """Create an empty file.

    Returns:
        Saved File instance without sections.
    """
    return File.objects.create(
        name='chapter-01.txt',
        assets_path='assets/chapter-01.txt',
        type=1,
    )


@pytest.fixture
def make_section(db):
    """Factory for stored sections.

    Returns:
        Callable creating a Section from origin text and status.
    """
    def factory(origin_text: str, desc: str = '', status: int = 0) -> Section:
        return Section.objects.create(
            hash=section_hash(origin_text, desc),
            origin_text=origin_text,
            desc=desc,
            status=status,
        )
    return factory


@pytest.fixture
def file_with_sections(file_instance, make_section):
    """File listing five stored sections.

    Returns:
        File instance whose sections are s1..s5 in order.
    """
    for index in range(1, 6):
        section = make_section(f's{index}')
        file_instance.sections.append(section.hash)
        section.parents.add(file_instance)
    file_instance.save()
    return file_instance


@pytest.fixture
def candidates():
    """Three distinct section descriptors.

    Returns:
        List of CreateSectionDto.
    """
    return [
        CreateSectionDto(origin_text='Hello', desc='greeting'),
        CreateSectionDto(origin_text='World', desc='noun'),
        CreateSectionDto(origin_text='Bye', desc='farewell'),
    ]
