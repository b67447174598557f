"""
Management command to import inventory records from a CSV file or an Excel workbook
"""
import os
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from storefront.inventory.services import InventoryError
from storefront.inventory.spreadsheet import read_inventory_upload, import_inventory_rows, EXPORT_HEADERS


class Command(BaseCommand):
    help = "Imports inventory quantities from a .csv or .xlsx file with the inventory export columns"

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            '--csv-file',
            dest='file',
            type=str,
            required=True,
            help=f"Path to the .csv or .xlsx file (columns: {', '.join(EXPORT_HEADERS)})",
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would change without saving anything',
        )

    def handle(self, *args, **options):
        path = options['file']
        dry_run = options['dry_run']

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("IMPORTING INVENTORY"))
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(f"File: {path}")

        if not os.path.exists(path):
            raise CommandError(f"File not found at {path}")

        with open(path, 'rb') as f:
            content = f.read()
        try:
            rows = read_inventory_upload(os.path.basename(path), content)
        except InventoryError as e:
            raise CommandError(e.message)

        self.stdout.write(f"Rows read: {len(rows)}")

        with transaction.atomic():
            result = import_inventory_rows(rows)
            if dry_run:
                transaction.set_rollback(True)
                self.stdout.write(self.style.WARNING("Dry run: no changes saved"))

        for row_error in result['errors']:
            self.stdout.write(self.style.ERROR(f"Row {row_error['row']}: {'; '.join(row_error['errors'])}"))

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("IMPORT SUMMARY"))
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(f"Created: {result['created']}")
        self.stdout.write(f"Updated: {result['updated']}")
        self.stdout.write(f"Unchanged: {result['unchanged']}")
        self.stdout.write(f"Rows with errors: {len(result['errors'])}")
