"""Input data for creating files and sections."""

from dataclasses import dataclass
from typing import final

from server.apps.assets.models import Section, SectionStatus


@final
@dataclass(frozen=True, kw_only=True)
class CreateFileDto:
    """Descriptor of a file to create or refresh."""

    name: str
    assets_path: str
    type: int = 0


@final
@dataclass(frozen=True, kw_only=True)
class CreateSectionDto:
    """Candidate section for ``merge_sections``.

    ``hash`` may be omitted; it is then derived from ``origin_text``
    and ``desc``.

    Raises:
        ValueError: If ``hash`` does not fit the ``Section.hash`` column
            or ``status`` is not a ``SectionStatus`` value.
    """

    origin_text: str
    desc: str = ''
    hash: str | None = None
    status: int = SectionStatus.NEW

    def __post_init__(self) -> None:
        """Validate caller supplied hash and status."""
        max_length = Section._meta.get_field('hash').max_length  # noqa: SLF001
        if self.hash is not None and len(self.hash) > max_length:
            raise ValueError(
                f'Section hash longer than {max_length} characters',
            )
        valid_status = not isinstance(self.status, bool) and (
            self.status in SectionStatus.values
        )
        if not valid_status:
            raise ValueError(f'Unknown section status: {self.status!r}')
