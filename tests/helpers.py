"""
Shared builders for the test suite.
"""
from datetime import timedelta

from django.contrib.auth.models import User
from django.utils import timezone

from task import services
from user.models import Role
from work.models import ReviewStatus, Work, WorkType


def make_user(username, role=Role.MEMBER, password='secret123', is_active=True):
    user = User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password=password,
        is_active=is_active,
    )
    user.profile.role = role
    user.profile.real_name = username.title()
    user.profile.save()
    return user


def future(days=7):
    return timezone.now() + timedelta(days=days)


def make_task(creator, assigned_to=(), **fields):
    fields.setdefault('title', 'Campus night shoot')
    fields.setdefault('description', 'Night photography around the library.')
    fields.setdefault('type', 'photo')
    fields.setdefault('deadline', future())
    return services.create_task(creator, assigned_to=[u.pk for u in assigned_to], **fields)


def make_work(author, status=ReviewStatus.APPROVED, **fields):
    fields.setdefault('title', 'Blue hour')
    fields.setdefault('type', WorkType.PHOTO)
    fields.setdefault('author_name', author.username)
    return Work.objects.create(author=author, status=status, **fields)
