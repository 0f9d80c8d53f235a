"""Management command to refresh cached progress counters of files."""

import logging
from typing import Any

from django.core.management.base import BaseCommand

from server.apps.assets.logic.progress_operations import recalculate_progress
from server.apps.assets.models import File

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Recalculate translated/corrected/polished counters."""

    help = 'Recalculate progress counters of files from section status'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            'names',
            nargs='*',
            help='File names to recalculate (default: all files)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the recalculation.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        files = File.objects.all()
        if options['names']:
            files = files.filter(name__in=options['names'])

        count = 0
        for file_instance in files:
            recalculate_progress(file_instance)
            self.stdout.write(
                f'{file_instance.name}: '
                f'{file_instance.translated}/'
                f'{file_instance.corrected}/'
                f'{file_instance.polished} '
                f'of {len(file_instance.sections)}',
            )
            count += 1

        logger.info('Recalculated progress for %d files', count)
        self.stdout.write(
            self.style.SUCCESS(f'Recalculated {count} files'),
        )
