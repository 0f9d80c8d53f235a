"""Tests for file operations business logic."""

import pytest

from server.apps.assets.dto import CreateFileDto, CreateSectionDto
from server.apps.assets.exceptions import (
    NO_SPECIFIED_SECTION,
    NoSpecifiedSectionError,
)
from server.apps.assets.infrastructure.hashing import section_hash
from server.apps.assets.infrastructure.repositories import (
    FileRepository,
    SectionRepository,
)
from server.apps.assets.logic.file_operations import (
    contract_sections,
    create_file,
    file_exists,
    get_contracted_sections,
    get_file_by_name,
    get_published_text,
    get_sections,
    merge_sections,
)
from server.apps.assets.models import Commit, Contractor, File, Section


class _NameBlindFileRepository(FileRepository):
    """Never finds an existing file, like a request losing a race."""

    def find_by_name(self, name):
        return None


class _StaleFileRepository(FileRepository):
    """Hands out a copy of the file loaded before other writers ran."""

    def __init__(self, stale: File) -> None:
        self.stale = stale

    def find_by_name(self, name):
        return self.stale


class _FailingSectionRepository(SectionRepository):
    """Fails to create sections after a number of successful inserts."""

    def __init__(self, successes: int) -> None:
        self.successes = successes

    def create(self, section_hash, dto):
        if self.successes <= 0:
            return None
        self.successes -= 1
        return super().create(section_hash, dto)


@pytest.mark.django_db
def test_create_file_new(db):
    """Test create_file stores a new file."""
    dto = CreateFileDto(name='a.txt', assets_path='assets/a.txt', type=2)

    file_instance = create_file(dto)

    assert file_instance is not None
    assert file_instance.pk is not None
    assert file_instance.assets_path == 'assets/a.txt'
    assert file_instance.type == 2
    assert file_instance.last_updated is not None


@pytest.mark.django_db
def test_create_file_twice_updates_existing(db):
    """Test second create with same name refreshes path and timestamp."""
    first = create_file(CreateFileDto(name='a.txt', assets_path='old'))
    first_updated = first.last_updated

    second = create_file(CreateFileDto(name='a.txt', assets_path='new'))

    assert second.pk == first.pk
    assert File.objects.count() == 1
    stored = File.objects.get(name='a.txt')
    assert stored.assets_path == 'new'
    assert stored.last_updated >= first_updated


@pytest.mark.django_db
def test_create_file_keeps_sections_of_existing(file_with_sections):
    """Test refreshing a file does not touch its sections."""
    hashes = list(file_with_sections.sections)

    create_file(CreateFileDto(
        name=file_with_sections.name,
        assets_path='moved',
    ))

    file_with_sections.refresh_from_db()
    assert file_with_sections.sections == hashes


@pytest.mark.django_db
def test_create_file_keeps_concurrent_merge(file_instance, candidates):
    """Test refreshing from a stale instance keeps sections merged meanwhile."""
    stale = File.objects.get(pk=file_instance.pk)
    merge_sections(file_instance, candidates)

    create_file(
        CreateFileDto(name=stale.name, assets_path='moved'),
        files=_StaleFileRepository(stale),
    )

    file_instance.refresh_from_db()
    assert file_instance.assets_path == 'moved'
    assert len(file_instance.sections) == 3


@pytest.mark.django_db
def test_create_file_returns_none_on_conflict(file_instance):
    """Test uniqueness violation returns None instead of raising."""
    dto = CreateFileDto(name=file_instance.name, assets_path='other')

    result = create_file(dto, files=_NameBlindFileRepository())

    assert result is None
    assert File.objects.count() == 1
    file_instance.refresh_from_db()
    assert file_instance.assets_path == 'assets/chapter-01.txt'


@pytest.mark.django_db
def test_get_file_by_name(file_instance):
    """Test file lookup by name."""
    assert get_file_by_name(file_instance.name) == file_instance


@pytest.mark.django_db
def test_get_file_by_name_not_found(db):
    """Test lookup of missing file raises DoesNotExist."""
    with pytest.raises(File.DoesNotExist):
        get_file_by_name('missing.txt')


@pytest.mark.django_db
def test_file_exists(file_instance):
    """Test file_exists for present and missing names."""
    assert file_exists(file_instance.name)
    assert not file_exists('missing.txt')


@pytest.mark.django_db
def test_merge_sections_distinct(file_instance, candidates):
    """Test each distinct candidate creates and adds one section."""
    added = merge_sections(file_instance, candidates)

    assert added == 3
    assert Section.objects.count() == 3
    file_instance.refresh_from_db()
    assert file_instance.sections == [
        section_hash('Hello', 'greeting'),
        section_hash('World', 'noun'),
        section_hash('Bye', 'farewell'),
    ]
    assert file_instance.last_updated is not None
    # New sections have status 0
    assert file_instance.translated == 0
    assert file_instance.corrected == 0
    assert file_instance.polished == 0


@pytest.mark.django_db
def test_merge_sections_identical_candidates(file_instance):
    """Test identical text and description produce one section."""
    duplicate = CreateSectionDto(origin_text='Hello', desc='greeting')

    added = merge_sections(file_instance, [duplicate, duplicate])

    assert added == 1
    assert Section.objects.count() == 1
    file_instance.refresh_from_db()
    assert file_instance.sections == [section_hash('Hello', 'greeting')]


@pytest.mark.django_db
def test_merge_sections_repeated_call(file_instance, candidates):
    """Test merging the same content again adds nothing."""
    merge_sections(file_instance, candidates)

    added = merge_sections(file_instance, list(reversed(candidates)))

    assert added == 0
    assert Section.objects.count() == 3
    file_instance.refresh_from_db()
    assert len(file_instance.sections) == 3


@pytest.mark.django_db
def test_merge_sections_counts_status(file_instance):
    """Test counters follow the status of each added section."""
    added = merge_sections(file_instance, [
        CreateSectionDto(origin_text='a', status=0),
        CreateSectionDto(origin_text='b', status=1),
        CreateSectionDto(origin_text='c', status=2),
        CreateSectionDto(origin_text='d', status=3),
    ])

    assert added == 4
    file_instance.refresh_from_db()
    assert file_instance.translated == 3
    assert file_instance.corrected == 2
    assert file_instance.polished == 1


@pytest.mark.django_db
def test_merge_sections_reuses_existing_section(file_instance, make_section):
    """Test a section already stored is shared, with its own status."""
    existing = make_section('Hello', 'greeting', status=2)
    other_file = File.objects.create(name='chapter-02.txt')

    merge_sections(other_file, [
        CreateSectionDto(origin_text='Hello', desc='greeting'),
    ])
    added = merge_sections(file_instance, [
        CreateSectionDto(origin_text='Hello', desc='greeting'),
    ])

    assert added == 1
    assert Section.objects.count() == 1
    file_instance.refresh_from_db()
    assert file_instance.sections == [existing.hash]
    assert file_instance.translated == 1
    assert file_instance.corrected == 1
    assert file_instance.polished == 0
    assert set(existing.parents.all()) == {file_instance, other_file}


@pytest.mark.django_db
def test_merge_sections_uses_supplied_hash(file_instance):
    """Test a precomputed hash is used as is."""
    added = merge_sections(file_instance, [
        CreateSectionDto(origin_text='Hello', hash='f' * 32),
    ])

    assert added == 1
    assert Section.objects.filter(hash='f' * 32).exists()
    file_instance.refresh_from_db()
    assert file_instance.sections == ['f' * 32]


@pytest.mark.django_db
def test_merge_sections_links_parent(file_instance, candidates):
    """Test added sections record the file as parent."""
    merge_sections(file_instance, candidates)

    for section in Section.objects.all():
        assert list(section.parents.all()) == [file_instance]


@pytest.mark.django_db
def test_merge_sections_aborts_on_create_failure(file_instance, candidates):
    """Test failed creation aborts the merge without rollback."""
    sections = _FailingSectionRepository(successes=1)

    result = merge_sections(file_instance, candidates, sections=sections)

    assert result is None
    # First section stays persisted and linked
    first = Section.objects.get(hash=section_hash('Hello', 'greeting'))
    assert list(first.parents.all()) == [file_instance]
    assert Section.objects.count() == 1
    # File itself was not saved
    file_instance.refresh_from_db()
    assert file_instance.sections == []


@pytest.mark.django_db
def test_contract_sections(file_with_sections, user):
    """Test contracting assigns sections in order and records the total."""
    hashes = list(file_with_sections.sections)

    result = contract_sections(file_with_sections, user, 3)

    assert result == file_with_sections
    contracted = Section.objects.filter(contractor=user)
    assert set(contracted.values_list('hash', flat=True)) == set(hashes[:3])
    contractor = Contractor.objects.get(file=file_with_sections, user=user)
    assert contractor.count == 3


@pytest.mark.django_db
def test_contract_sections_is_additive(file_with_sections, user):
    """Test repeated contracting sums into the same contractor entry."""
    contract_sections(file_with_sections, user, 3)
    contract_sections(file_with_sections, user, 2)

    assert Section.objects.filter(contractor=user).count() == 5
    contractor = Contractor.objects.get(file=file_with_sections, user=user)
    assert contractor.count == 5


@pytest.mark.django_db
def test_contract_sections_skips_taken(file_with_sections, user, other_user):
    """Test sections held by another user are skipped."""
    hashes = list(file_with_sections.sections)
    Section.objects.filter(hash=hashes[0]).update(contractor=other_user)

    contract_sections(file_with_sections, user, 2)

    contracted = Section.objects.filter(contractor=user)
    assert set(contracted.values_list('hash', flat=True)) == set(hashes[1:3])


@pytest.mark.django_db
def test_contract_sections_stops_when_exhausted(file_with_sections, user):
    """Test asking for more sections than free ones assigns what is left."""
    contract_sections(file_with_sections, user, 10)

    contractor = Contractor.objects.get(file=file_with_sections, user=user)
    assert contractor.count == 5


@pytest.mark.django_db
def test_contract_sections_keeps_concurrent_merge(file_with_sections, user):
    """Test contracting through a stale file keeps sections merged meanwhile."""
    stale = File.objects.get(pk=file_with_sections.pk)
    merge_sections(file_with_sections, [
        CreateSectionDto(origin_text='late', status=1),
    ])
    late_hash = section_hash('late', '')

    contract_sections(stale, user, 1)

    file_with_sections.refresh_from_db()
    assert file_with_sections.sections[-1] == late_hash
    assert len(file_with_sections.sections) == 6
    assert file_with_sections.translated == 1
    late = Section.objects.get(hash=late_hash)
    assert list(late.parents.all()) == [file_with_sections]


@pytest.mark.django_db
def test_contract_sections_missing_section(file_with_sections, user):
    """Test a dangling hash raises instead of returning partial results."""
    file_with_sections.sections.insert(0, 'dead' * 8)

    with pytest.raises(NoSpecifiedSectionError) as exc_info:
        contract_sections(file_with_sections, user, 3)

    assert exc_info.value.code == NO_SPECIFIED_SECTION
    assert exc_info.value.section_hash == 'dead' * 8
    assert not Contractor.objects.exists()


@pytest.mark.django_db
def test_get_contracted_sections(file_with_sections, user, other_user):
    """Test only sections of the given user are returned, in order."""
    hashes = list(file_with_sections.sections)
    Section.objects.filter(hash__in=hashes[:2]).update(contractor=user)
    Section.objects.filter(hash=hashes[2]).update(contractor=other_user)

    result = get_contracted_sections(file_with_sections, user)

    assert [section.hash for section in result] == hashes[:2]


@pytest.mark.django_db
def test_get_contracted_sections_missing_section(file_with_sections, user):
    """Test a dangling hash raises NoSpecifiedSectionError."""
    file_with_sections.sections.append('dead' * 8)

    with pytest.raises(NoSpecifiedSectionError):
        get_contracted_sections(file_with_sections, user)


@pytest.mark.django_db
def test_get_sections_page(file_instance, make_section):
    """Test first page of two out of three sections."""
    hashes = [make_section(text).hash for text in ('h1', 'h2', 'h3')]
    file_instance.sections = list(hashes)
    file_instance.save()

    result = get_sections(file_instance, 0, 2)

    assert [section.hash for section in result] == hashes[:2]
    # Hash list is not consumed by reading
    assert file_instance.sections == hashes


@pytest.mark.django_db
def test_get_sections_repeated_reads(file_with_sections):
    """Test repeated reads return the same page."""
    first = get_sections(file_with_sections, 1, 2)
    second = get_sections(file_with_sections, 1, 2)

    assert first == second
    assert len(file_with_sections.sections) == 5


@pytest.mark.django_db
def test_get_sections_zero_count_reads_to_end(file_with_sections):
    """Test count 0 returns everything from the offset."""
    result = get_sections(file_with_sections, 2, 0)

    assert [section.hash for section in result] == (
        file_with_sections.sections[2:]
    )


@pytest.mark.django_db
def test_get_sections_default_reads_all(file_with_sections):
    """Test no arguments returns all sections."""
    result = get_sections(file_with_sections)

    assert len(result) == 5


@pytest.mark.django_db
def test_get_sections_past_end(file_with_sections):
    """Test page running past the end is truncated."""
    result = get_sections(file_with_sections, 4, 10)

    assert [section.hash for section in result] == (
        file_with_sections.sections[4:]
    )


@pytest.mark.django_db
def test_get_sections_negative_offset(file_with_sections):
    """Test negative offset is rejected."""
    with pytest.raises(ValueError, match='must not be negative'):
        get_sections(file_with_sections, -1, 2)


@pytest.mark.django_db
def test_get_sections_missing_section(file_with_sections):
    """Test a dangling hash in the page raises NoSpecifiedSectionError."""
    file_with_sections.sections.insert(0, 'dead' * 8)

    with pytest.raises(NoSpecifiedSectionError):
        get_sections(file_with_sections, 0, 2)


@pytest.mark.django_db
def test_get_published_text_none_published(file_with_sections):
    """Test sections without published commit give no text."""
    assert get_published_text(file_with_sections) == []


@pytest.mark.django_db
def test_get_published_text(file_with_sections, user):
    """Test published commits are returned in section order."""
    hashes = file_with_sections.sections
    for hash_value, text in ((hashes[3], 'four'), (hashes[1], 'two')):
        section = Section.objects.get(hash=hash_value)
        Commit.objects.create(section=section, user=user, text='draft')
        commit = Commit.objects.create(section=section, user=user, text=text)
        section.published_commit = commit
        section.save()

    assert get_published_text(file_with_sections) == ['two', 'four']


@pytest.mark.django_db
def test_get_published_text_skips_foreign_commit(file_with_sections, user):
    """Test a published commit of another section is skipped."""
    hashes = file_with_sections.sections
    owner = Section.objects.get(hash=hashes[0])
    foreign_commit = Commit.objects.create(section=owner, user=user, text='x')
    Section.objects.filter(hash=hashes[1]).update(
        published_commit=foreign_commit,
    )

    assert get_published_text(file_with_sections) == []
