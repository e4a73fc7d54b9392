import logging

from django.db import models, transaction
from django.db.models import F
from django.contrib.auth.models import User
from django.utils import timezone

logger = logging.getLogger(__name__)


class WorkType(models.TextChoices):
    PHOTO = 'photo', 'Photo'
    VIDEO = 'video', 'Video'


class ReviewStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class WorkCategory(models.TextChoices):
    PORTRAIT = 'portrait', 'Portrait'
    LANDSCAPE = 'landscape', 'Landscape'
    STREET = 'street', 'Street'
    ARCHITECTURE = 'architecture', 'Architecture'
    DOCUMENTARY = 'documentary', 'Documentary'
    SHORT_FILM = 'short_film', 'Short Film'
    MUSIC_VIDEO = 'music_video', 'Music Video'
    ADVERTISEMENT = 'advertisement', 'Advertisement'
    OTHER = 'other', 'Other'


# Accepted mimetype prefix per work type
MIMETYPE_PREFIX = {
    WorkType.PHOTO: 'image/',
    WorkType.VIDEO: 'video/',
}

MAX_FILES = 10


class Work(models.Model):
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=1000, blank=True, default='')
    type = models.CharField(max_length=10, choices=WorkType.choices, db_index=True)
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name='works')
    author_name = models.CharField(max_length=50)
    tags = models.JSONField(default=list, blank=True)
    category = models.CharField(max_length=20, choices=WorkCategory.choices, default=WorkCategory.OTHER)
    status = models.CharField(max_length=10, choices=ReviewStatus.choices, default=ReviewStatus.PENDING, db_index=True)
    is_public = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)
    views = models.PositiveIntegerField(default=0)
    likes = models.PositiveIntegerField(default=0)
    liked_by = models.ManyToManyField(User, related_name='liked_works', blank=True)
    # camera, lens, settings (iso, aperture, shutter_speed, focal_length), location, shooting_date
    metadata = models.JSONField(default=dict, blank=True)
    submission_date = models.DateTimeField(default=timezone.now, db_index=True)
    approval_date = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='approved_works'
    )
    rejection_reason = models.CharField(max_length=200, blank=True, default='')
    related_task = models.ForeignKey(
        'task.Task', on_delete=models.SET_NULL, null=True, blank=True, related_name='submitted_works'
    )
    is_task_submission = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['type', 'status'], name='work_type_status_idx'),
            models.Index(fields=['author', '-created_at'], name='work_author_created_idx'),
        ]

    @property
    def comment_count(self):
        return self.comments.count()

    @property
    def file_count(self):
        return self.files.count()

    @property
    def thumbnail_file(self):
        """First stored photo; videos have no thumbnail."""
        if self.type != WorkType.PHOTO:
            return None
        first = self.files.first()
        return first.file if first else None

    def increment_views(self):
        Work.objects.filter(pk=self.pk).update(views=F('views') + 1)
        self.refresh_from_db(fields=['views'])

    def toggle_like(self, user):
        """Like or unlike on behalf of `user`. Returns True when the work is now liked."""
        with transaction.atomic():
            locked = Work.objects.select_for_update().get(pk=self.pk)
            if locked.liked_by.filter(pk=user.pk).exists():
                locked.liked_by.remove(user)
                locked.likes = max(0, locked.likes - 1)
                liked = False
            else:
                locked.liked_by.add(user)
                locked.likes += 1
                liked = True
            locked.save(update_fields=['likes', 'updated_at'])
        self.likes = locked.likes
        return liked

    def approve(self, approved_by):
        self.status = ReviewStatus.APPROVED
        self.approval_date = timezone.now()
        self.approved_by = approved_by
        self.rejection_reason = ''
        self.save(update_fields=['status', 'approval_date', 'approved_by', 'rejection_reason', 'updated_at'])

    def reject(self, reason):
        self.status = ReviewStatus.REJECTED
        self.rejection_reason = reason
        self.approval_date = None
        self.approved_by = None
        self.save(update_fields=['status', 'approval_date', 'approved_by', 'rejection_reason', 'updated_at'])

    def delete_files(self):
        """Remove the stored files from media storage. The rows go with the work."""
        for work_file in self.files.all():
            if work_file.file:
                work_file.file.delete(save=False)
        logger.info(f"Deleted stored files of work {self.pk}")


def work_file_path(instance, filename):
    folder = 'photos' if instance.mimetype.startswith('image/') else 'videos'
    return f'works/{folder}/{filename}'


class WorkFile(models.Model):
    work = models.ForeignKey(Work, on_delete=models.CASCADE, related_name='files')
    file = models.FileField(upload_to=work_file_path, max_length=255)
    original_name = models.CharField(max_length=255)
    mimetype = models.CharField(max_length=100)
    size = models.PositiveBigIntegerField(default=0)

    def __str__(self):
        return self.original_name

    class Meta:
        ordering = ['id']


class WorkComment(models.Model):
    work = models.ForeignKey(Work, on_delete=models.CASCADE, related_name='comments')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='work_comments')
    content = models.CharField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f'{self.user} on {self.work}'

    class Meta:
        ordering = ['created_at', 'id']
