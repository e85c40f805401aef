"""
Management command to import media from URLs (foreground execution).

Runs the same pipeline as the /api/import endpoint and prints one line per URL.
"""

import json

from django.core.management.base import BaseCommand

from gallery.operations import import_urls


class Command(BaseCommand):
    help = 'Import GIF/WebP media from one or more URLs'

    def add_arguments(self, parser):
        parser.add_argument('urls', nargs='+', type=str, help='URLs to import')
        parser.add_argument('--verbose', action='store_true', help='Verbose output')
        parser.add_argument('--json', action='store_true', help='JSON output')

    def handle(self, *args, **options):
        urls = options['urls']
        verbose = options['verbose']
        json_output = options['json']

        def logger(message):
            if verbose:
                self.stdout.write(message)

        results = import_urls(urls, logger=logger)

        if json_output:
            self.stdout.write(
                json.dumps({'results': [r.to_dict() for r in results]}, indent=2)
            )
            return

        for result in results:
            if result.success:
                self.stdout.write(self.style.SUCCESS(f'✓ {result.url} -> {result.slug}'))
            else:
                self.stdout.write(self.style.ERROR(f'✗ {result.url}: {result.error}'))

        succeeded = sum(1 for r in results if r.success)
        self.stdout.write(f'\nImported {succeeded} of {len(results)} URLs')
