"""
Management command to export slips to a JSON file.

Writes slips in the same persisted form the JSON storage backend uses, so
the file can serve as a backup or as the data file of a JSON-backed
installation.

Usage:
    python manage.py export_slips backup/slips.json
    python manage.py export_slips pending.json --status Pending
    python manage.py export_slips backup/slips.json --dry-run
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.slips.domain import SlipStatus
from apps.slips.exceptions import PersistenceError
from apps.slips.repositories import JsonFileSlipRepository
from apps.slips.store import get_slip_store


class Command(BaseCommand):
    help = 'Export weighbridge slips to a JSON file'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Destination JSON file')
        parser.add_argument(
            '--status',
            choices=SlipStatus.values,
            help='Only export slips with this status',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be exported without writing the file',
        )

    def handle(self, *args, **options):
        store = get_slip_store()
        try:
            if options['status'] == SlipStatus.PENDING:
                slips = store.list_pending()
            elif options['status'] == SlipStatus.COMPLETE:
                slips = store.list_complete()
            else:
                slips = store.list()
        except PersistenceError as exc:
            raise CommandError(str(exc)) from exc

        if not slips:
            self.stdout.write(self.style.WARNING('No slips to export.'))
            return

        self.stdout.write(f'\nExporting {len(slips)} slip(s):\n')
        for slip in slips:
            self.stdout.write(
                f'  - #{slip.slip_number} | {slip.vehicle_number} | {slip.material} | {slip.status}'
            )

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No file written.'))
            return

        path = Path(options['path'])
        try:
            JsonFileSlipRepository(path).save(slips)
        except PersistenceError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(f'\nExported {len(slips)} slip(s) to {path}'))
