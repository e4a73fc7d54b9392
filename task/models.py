import logging

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone

logger = logging.getLogger(__name__)


class TaskType(models.TextChoices):
    PHOTO = 'photo', 'Photo'
    VIDEO = 'video', 'Video'
    BOTH = 'both', 'Both'


class Priority(models.TextChoices):
    LOW = 'low', 'Low'
    MEDIUM = 'medium', 'Medium'
    HIGH = 'high', 'High'
    URGENT = 'urgent', 'Urgent'


# Sort rank, higher is more pressing
PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.URGENT: 3,
}


class Status(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    PUBLISHED = 'published', 'Published'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class TaskCategory(models.TextChoices):
    PORTRAIT = 'portrait', 'Portrait'
    LANDSCAPE = 'landscape', 'Landscape'
    STREET = 'street', 'Street'
    ARCHITECTURE = 'architecture', 'Architecture'
    DOCUMENTARY = 'documentary', 'Documentary'
    SHORT_FILM = 'short_film', 'Short Film'
    MUSIC_VIDEO = 'music_video', 'Music Video'
    ADVERTISEMENT = 'advertisement', 'Advertisement'
    EVENT = 'event', 'Event'
    OTHER = 'other', 'Other'


class AssignmentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'
    SUBMITTED = 'submitted', 'Submitted'


# Assignment states counted as done by the completion rate
DONE_STATUSES = (AssignmentStatus.COMPLETED, AssignmentStatus.SUBMITTED)


def completion_percentage(done, total):
    """Integer percentage of `done` out of `total`, rounded half up; 0 for no assignments."""
    if total == 0:
        return 0
    return (200 * done + total) // (2 * total)


class Task(models.Model):
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=1000)
    type = models.CharField(max_length=10, choices=TaskType.choices, default=TaskType.BOTH)
    creator = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_tasks'
    )
    deadline = models.DateTimeField(db_index=True)
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True)
    min_files = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    max_files = models.PositiveSmallIntegerField(
        default=5, validators=[MinValueValidator(1), MaxValueValidator(10)]
    )
    specifications = models.TextField(max_length=500, blank=True, default='')
    category = models.CharField(max_length=20, choices=TaskCategory.choices, default=TaskCategory.OTHER)
    tags = models.JSONField(default=list, blank=True)
    is_public = models.BooleanField(default=False)
    completion_rate = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    submission_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['creator', 'status'], name='task_creator_status_idx'),
            models.Index(fields=['priority', 'deadline'], name='task_priority_deadline_idx'),
        ]

    @property
    def requirements(self):
        return {
            'min_files': self.min_files,
            'max_files': self.max_files,
            'specifications': self.specifications,
        }

    @property
    def assigned_count(self):
        return self.assignments.count()

    @property
    def completed_count(self):
        return self.assignments.filter(status__in=DONE_STATUSES).count()

    @property
    def submitted_count(self):
        return self.assignments.filter(status=AssignmentStatus.SUBMITTED).count()

    @property
    def is_overdue(self):
        return self.status == Status.PUBLISHED and self.deadline < timezone.now()

    def recompute_completion_rate(self, save=True):
        total = self.assignments.count()
        done = self.assignments.filter(status__in=DONE_STATUSES).count()
        self.completion_rate = completion_percentage(done, total)
        if save:
            self.save(update_fields=['completion_rate', 'submission_count', 'updated_at'])
        return self.completion_rate

    def assign_users(self, users):
        """
        Add a pending assignment for every user not already on the task.
        Existing assignments are left untouched. Returns the new assignments.
        """
        existing = set(self.assignments.values_list('user_id', flat=True))
        created = []
        for user in users:
            if user.pk in existing:
                continue
            created.append(TaskAssignment.objects.create(task=self, user=user))
            existing.add(user.pk)
        self.recompute_completion_rate()
        return created

    def remove_assignment(self, user_id):
        """Drop the user's assignment (and its work link). Returns True if one existed."""
        deleted, _ = self.assignments.filter(user_id=user_id).delete()
        self.recompute_completion_rate()
        return bool(deleted)

    def update_user_status(self, user_id, status, work=None, feedback=''):
        """
        Set a user's assignment status, optionally attaching a submitted work
        and feedback. A user without an assignment is ignored and None is
        returned; otherwise the updated assignment is returned.
        """
        assignment = self.assignments.filter(user_id=user_id).first()
        if assignment is not None:
            assignment.status = status
            if work is not None:
                assignment.submitted_work = work
                assignment.submitted_at = timezone.now()
                self.submission_count += 1
            if feedback:
                assignment.feedback = feedback
            assignment.save()
        self.recompute_completion_rate()
        return assignment

    def _set_status(self, status):
        self.status = status
        self.save(update_fields=['status', 'updated_at'])

    def publish(self):
        self._set_status(Status.PUBLISHED)

    def complete(self):
        self._set_status(Status.COMPLETED)

    def cancel(self):
        self._set_status(Status.CANCELLED)


class TaskAssignment(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='assignments')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='task_assignments')
    assigned_at = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, choices=AssignmentStatus.choices, default=AssignmentStatus.PENDING)
    submitted_work = models.ForeignKey(
        'work.Work', on_delete=models.SET_NULL, null=True, blank=True, related_name='task_assignments'
    )
    submitted_at = models.DateTimeField(null=True, blank=True)
    feedback = models.CharField(max_length=500, blank=True, default='')

    def __str__(self):
        return f'{self.user} on {self.task}'

    class Meta:
        ordering = ['assigned_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['task', 'user'], name='unique_task_assignment'),
        ]
