from django.conf import settings
from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from user.models import Role, UserProfile


class Command(BaseCommand):
    help = 'Create the initial admin account, or promote an existing account with that email.'

    def add_arguments(self, parser):
        parser.add_argument('--username', default=settings.ADMIN_USERNAME)
        parser.add_argument('--email', default=settings.ADMIN_EMAIL)
        parser.add_argument('--password', default=settings.ADMIN_PASSWORD)
        parser.add_argument('--real-name', default=settings.ADMIN_REAL_NAME)

    @transaction.atomic
    def handle(self, *args, **options):
        email = options['email'].lower()
        user = User.objects.filter(email__iexact=email).first()

        if user is None:
            if not options['password']:
                raise CommandError('A password is required (--password or ADMIN_PASSWORD).')
            user = User.objects.create_user(
                username=options['username'],
                email=email,
                password=options['password'],
                is_staff=True,
            )
            self.stdout.write(f"Created admin account {email}.")
        else:
            self.stdout.write(f"Account {email} already exists.")

        profile, _ = UserProfile.objects.get_or_create(user=user)
        if profile.role != Role.ADMIN or not profile.real_name:
            profile.role = Role.ADMIN
            profile.real_name = profile.real_name or options['real_name']
            profile.save(update_fields=['role', 'real_name'])
            self.stdout.write(self.style.SUCCESS(f"Assigned the admin role to {email}."))
        if not user.is_active or not user.is_staff:
            user.is_active = True
            user.is_staff = True
            user.save(update_fields=['is_active', 'is_staff'])
