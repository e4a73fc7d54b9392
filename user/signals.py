from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Role, UserProfile


@receiver(post_save, sender=User)
def ensure_profile(sender, instance, created, **kwargs):
    """Every account gets a profile; superusers start out as admins."""
    if created:
        UserProfile.objects.get_or_create(
            user=instance,
            defaults={'role': Role.ADMIN if instance.is_superuser else Role.USER},
        )
