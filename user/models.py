from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone


class Role(models.TextChoices):
    USER = 'user', 'User'
    MEMBER = 'member', 'Member'
    ADMIN = 'admin', 'Admin'


# Roles allowed to take part in the task workflow and upload works
MEMBER_ROLES = frozenset({Role.MEMBER, Role.ADMIN})


class UserProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)
    real_name = models.CharField(max_length=50, blank=True, default='')
    avatar = models.ImageField(upload_to='avatars/', null=True, blank=True)
    bio = models.TextField(max_length=500, blank=True, default='')
    instagram = models.CharField(max_length=255, blank=True, default='')
    weibo = models.CharField(max_length=255, blank=True, default='')
    bilibili = models.CharField(max_length=255, blank=True, default='')
    join_date = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.user.username

    @property
    def social_links(self):
        return {
            'instagram': self.instagram,
            'weibo': self.weibo,
            'bilibili': self.bilibili,
        }


def get_role(user):
    """
    Resolve a request user to a Role. Anonymous users and users without a
    profile resolve to None.
    """
    if user is None or not user.is_authenticated:
        return None
    profile = getattr(user, 'profile', None)
    if profile is None:
        return None
    return Role(profile.role)


def is_admin(user):
    return get_role(user) == Role.ADMIN


def is_member_or_admin(user):
    return get_role(user) in MEMBER_ROLES


def display_name(user):
    profile = getattr(user, 'profile', None)
    if profile is not None and profile.real_name:
        return profile.real_name
    return user.username
