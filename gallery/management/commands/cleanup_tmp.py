"""
Management command to clean up abandoned import workspaces.

Finds and removes import-* directories that were left behind when the
process was killed in the middle of an import.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
import shutil

from django.core.management.base import BaseCommand
from django.utils import timezone

from gallery.service.config import get_tmp_dir
from gallery.service.constants import WORKSPACE_PREFIX


def plural(count):
    return 'ies' if count != 1 else 'y'


class Command(BaseCommand):
    help = 'Clean up abandoned import-* workspace directories'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without actually deleting'
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Delete workspaces without confirmation'
        )
        parser.add_argument(
            '--max-age',
            type=int,
            default=60,
            help='Maximum age in minutes before considering a workspace abandoned (default: 60)'
        )

    def handle(self, *args, **options):
        """Find and clean up abandoned workspaces"""
        dry_run = options['dry_run']
        force = options['force']
        max_age_minutes = options['max_age']

        tmp_dir = get_tmp_dir()
        workspaces = []
        if tmp_dir.exists():
            workspaces = [d for d in sorted(tmp_dir.glob(f'{WORKSPACE_PREFIX}*')) if d.is_dir()]

        if not workspaces:
            self.stdout.write(self.style.SUCCESS("No import workspaces found"))
            return

        # Filter by age
        now = timezone.now()
        max_age = timedelta(minutes=max_age_minutes)
        abandoned = []

        for workspace in workspaces:
            mtime = workspace.stat().st_mtime
            age = now - datetime.fromtimestamp(mtime, tz=dt_timezone.utc)
            if age > max_age:
                size = sum(f.stat().st_size for f in workspace.rglob('*') if f.is_file())
                abandoned.append({'path': workspace, 'age': age, 'size': size})

        if not abandoned:
            self.stdout.write(self.style.SUCCESS(
                f"Found {len(workspaces)} import director{plural(len(workspaces))}, "
                f"but none are older than {max_age_minutes} minutes"
            ))
            return

        self.stdout.write(f"\nFound {len(abandoned)} abandoned import director{plural(len(abandoned))}:")
        self.stdout.write(f"{'=' * 80}")

        total_size = 0
        for info in abandoned:
            total_size += info['size']
            age_str = str(info['age']).split('.')[0]  # Remove microseconds
            size_mb = info['size'] / (1024 * 1024)
            self.stdout.write(
                f"{info['path'].name:40} | Age: {age_str:15} | Size: {size_mb:6.1f} MB"
            )

        self.stdout.write(f"{'=' * 80}")
        self.stdout.write(f"Total size: {total_size / (1024 * 1024):.1f} MB\n")

        if dry_run:
            self.stdout.write(self.style.WARNING(
                f"\nDRY RUN: Would delete {len(abandoned)} director{plural(len(abandoned))}"
            ))
            self.stdout.write("Run without --dry-run to actually delete")
            return

        if not force:
            response = input(f"\nDelete these {len(abandoned)} director{plural(len(abandoned))}? [y/N]: ")
            if response.lower() != 'y':
                self.stdout.write("Cancelled")
                return

        deleted_count = 0
        for info in abandoned:
            try:
                shutil.rmtree(info['path'])
                self.stdout.write(self.style.SUCCESS(f"✓ Deleted: {info['path'].name}"))
                deleted_count += 1
            except OSError as e:
                self.stdout.write(self.style.ERROR(f"✗ Failed to delete {info['path'].name}: {e}"))

        self.stdout.write(self.style.SUCCESS(
            f"\n✓ Deleted {deleted_count} of {len(abandoned)} import director{plural(deleted_count)}"
        ))
