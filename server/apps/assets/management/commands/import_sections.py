"""Management command to merge sections from a JSON file into a File."""

import json
import logging
from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from server.apps.assets.dto import CreateFileDto, CreateSectionDto
from server.apps.assets.logic.file_operations import (
    create_file,
    merge_sections,
)
from server.apps.assets.models import SectionStatus

logger = logging.getLogger(__name__)


def _parse_candidates(raw: Any) -> list[CreateSectionDto]:
    """Build section descriptors from decoded JSON.

    Args:
        raw: Decoded JSON document, expected to be a list of objects.

    Returns:
        Section descriptors in document order.

    Raises:
        CommandError: If the document has the wrong shape or a section
            has an unknown status or an oversized hash.
    """
    if not isinstance(raw, list):
        raise CommandError('Expected a JSON list of sections')

    candidates = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict) or 'origin_text' not in item:
            raise CommandError(f'Section #{index} has no origin_text')
        try:
            candidates.append(CreateSectionDto(
                origin_text=item['origin_text'],
                desc=item.get('desc', ''),
                hash=item.get('hash'),
                status=item.get('status', SectionStatus.NEW),
            ))
        except ValueError as exc:
            raise CommandError(f'Section #{index} is invalid: {exc}') from exc
    return candidates


class Command(BaseCommand):
    """Create or refresh a file and merge sections into it."""

    help = 'Merge sections from a JSON list into a file'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument('name', help='Unique file name')
        parser.add_argument('source', help='Path to JSON list of sections')
        parser.add_argument(
            '--assets-path',
            default='',
            help='Location of the backing asset',
        )
        parser.add_argument(
            '--type',
            type=int,
            default=0,
            help='Classification tag of the file (default: 0)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the import command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the source cannot be read or merging fails.
        """
        source = Path(options['source'])
        try:
            raw = json.loads(source.read_text(encoding='utf-8'))
        except (OSError, ValueError) as exc:
            raise CommandError(f'Cannot read {source}: {exc}') from exc

        candidates = _parse_candidates(raw)

        file_instance = create_file(CreateFileDto(
            name=options['name'],
            assets_path=options['assets_path'],
            type=options['type'],
        ))
        if file_instance is None:
            raise CommandError(f'Failed to save file {options["name"]}')

        added = merge_sections(file_instance, candidates)
        if added is None:
            raise CommandError(
                f'Merge into {file_instance.name} aborted, see logs',
            )

        logger.info(
            'Imported %d of %d sections into %s',
            added,
            len(candidates),
            file_instance.name,
        )
        self.stdout.write(
            self.style.SUCCESS(
                f'Added {added} of {len(candidates)} sections '
                f'to {file_instance.name}',
            ),
        )
