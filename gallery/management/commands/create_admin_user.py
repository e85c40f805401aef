from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = (
        'Create or update the gallery admin user from arguments or '
        'GIFSELECTOR_ADMIN_USERNAME / GIFSELECTOR_ADMIN_PASSWORD.'
    )

    def add_arguments(self, parser):
        parser.add_argument(
            'username',
            nargs='?',
            help='Username (overrides GIFSELECTOR_ADMIN_USERNAME)',
        )
        parser.add_argument(
            'password',
            nargs='?',
            help='Password (overrides GIFSELECTOR_ADMIN_PASSWORD)',
        )

    def handle(self, *args, **options):
        username = options['username'] or settings.GIFSELECTOR_ADMIN_USERNAME
        password = options['password'] or settings.GIFSELECTOR_ADMIN_PASSWORD

        if not password:
            raise CommandError(
                'GIFSELECTOR_ADMIN_PASSWORD is required (set env var or pass as argument).'
            )

        User = get_user_model()

        user, created = User.objects.get_or_create(
            username=username,
            defaults={'is_active': True},
        )

        user.is_active = True
        user.is_staff = True
        user.is_superuser = True
        user.set_password(password)
        user.save()

        action = 'Created' if created else 'Updated'
        self.stdout.write(self.style.SUCCESS(f"{action} admin user '{username}'."))
