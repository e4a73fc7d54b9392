"""
Task workflow operations.

Every mutation runs in one transaction and re-reads the task with
``select_for_update`` so concurrent assignment changes on the same task are
serialized on databases with row locks.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import Avg, Case, Exists, IntegerField, OuterRef, Q, Sum, Value, When
from django.utils import timezone

from user.models import Role, is_admin
from utils.exceptions import DomainRuleViolation, NotAssignedError, ResourceNotFound
from work.models import Work
from .models import PRIORITY_RANK, AssignmentStatus, Status, Task, TaskAssignment

logger = logging.getLogger(__name__)


def _lock(task):
    return Task.objects.select_for_update().get(pk=task.pk)


def resolve_assignees(user_ids):
    """
    Map ids to active member accounts, keeping input order and dropping
    duplicates. Raises DomainRuleViolation unless every id resolves.
    """
    ids = list(dict.fromkeys(user_ids))
    users = User.objects.select_related('profile').in_bulk(ids) if ids else {}
    eligible = {
        pk: user for pk, user in users.items()
        if user.is_active and getattr(getattr(user, 'profile', None), 'role', None) == Role.MEMBER
    }
    if len(eligible) != len(ids):
        raise DomainRuleViolation('Some users do not exist or are not active members.')
    return [eligible[pk] for pk in ids]


@transaction.atomic
def create_task(creator, assigned_to=(), **fields):
    users = resolve_assignees(assigned_to)
    task = Task.objects.create(
        creator=creator,
        status=Status.DRAFT,
        completion_rate=0,
        submission_count=0,
        **fields,
    )
    task.assign_users(users)
    logger.info(f"User {creator.id} created task {task.id} with {len(users)} assignees")
    return task


@transaction.atomic
def assign_users(task, user_ids):
    users = resolve_assignees(user_ids)
    task = _lock(task)
    created = task.assign_users(users)
    logger.info(f"Task {task.id}: assigned {len(created)} new users ({len(users) - len(created)} already assigned)")
    return task


@transaction.atomic
def remove_assignment(task, user_id):
    task = _lock(task)
    if not task.remove_assignment(user_id):
        raise ResourceNotFound('This user is not assigned to the task.')
    logger.info(f"Task {task.id}: removed assignment of user {user_id}")
    return task


@transaction.atomic
def update_assignment_status(task, user_id, status, work_id=None, feedback=''):
    task = _lock(task)
    work = None
    if work_id is not None:
        work = Work.objects.filter(pk=work_id).first()
        if work is None:
            raise ResourceNotFound('Work not found.')

    assignment = task.update_user_status(user_id, status, work=work, feedback=feedback)
    if assignment is None:
        raise ResourceNotFound('This user is not assigned to the task.')
    logger.info(f"Task {task.id}: user {user_id} status set to {status}")
    return task


@transaction.atomic
def submit_work(task, user, work_id):
    """
    Submit one of the caller's works against a task they are assigned to.
    The assignment update and the work back-reference commit together.
    """
    task = _lock(task)
    if not task.assignments.filter(user=user).exists():
        raise NotAssignedError()

    work = Work.objects.select_for_update().filter(pk=work_id, author=user).first()
    if work is None:
        raise ResourceNotFound('Work not found or does not belong to you.')

    task.update_user_status(user.pk, AssignmentStatus.SUBMITTED, work=work)
    work.related_task = task
    work.is_task_submission = True
    work.save(update_fields=['related_task', 'is_task_submission', 'updated_at'])
    logger.info(f"Task {task.id}: user {user.id} submitted work {work.id}")
    return task


@transaction.atomic
def change_status(task, status):
    task = _lock(task)
    {
        Status.PUBLISHED: task.publish,
        Status.COMPLETED: task.complete,
        Status.CANCELLED: task.cancel,
    }[status]()
    logger.info(f"Task {task.id} moved to {status}")
    return task


def with_priority_rank(queryset):
    return queryset.annotate(
        priority_rank=Case(
            *[When(priority=priority, then=Value(rank)) for priority, rank in PRIORITY_RANK.items()],
            default=Value(0),
            output_field=IntegerField(),
        )
    )


def visible_tasks(user):
    """
    Tasks `user` may list. Admins see all; members see published tasks that
    are public or assigned to them.
    """
    qs = with_priority_rank(Task.objects.all())
    if not is_admin(user):
        assigned = TaskAssignment.objects.filter(task=OuterRef('pk'), user=user)
        qs = qs.filter(status=Status.PUBLISHED).filter(Q(Exists(assigned)) | Q(is_public=True))
    return qs.order_by('-priority_rank', 'deadline', '-created_at')


def can_view(user, task):
    if is_admin(user) or task.is_public:
        return True
    return task.assignments.filter(user=user).exists()


def stats_overview():
    now = timezone.now()
    published = Task.objects.filter(status=Status.PUBLISHED)
    figures = published.aggregate(
        avg_completion_rate=Avg('completion_rate'),
        total_submissions=Sum('submission_count'),
    )
    return {
        'total_tasks': Task.objects.count(),
        'published_tasks': published.count(),
        'completed_tasks': Task.objects.filter(status=Status.COMPLETED).count(),
        'overdue_tasks': published.filter(deadline__lt=now).count(),
        'avg_completion_rate': round(figures['avg_completion_rate'] or 0, 2),
        'total_assignments': TaskAssignment.objects.filter(task__status=Status.PUBLISHED).count(),
        'total_submissions': figures['total_submissions'] or 0,
    }


def lock_tasks_assigned_to(user):
    """Lock and return the tasks holding an assignment for `user`. Call inside a transaction."""
    assigned = TaskAssignment.objects.filter(user=user).values('task_id')
    return list(Task.objects.select_for_update().filter(pk__in=assigned))


def recompute_completion_rates(tasks):
    """Refresh tasks whose assignments were removed by a user deletion."""
    for task in tasks:
        task.recompute_completion_rate()
    if tasks:
        logger.info(f"Recomputed completion rate of {len(tasks)} tasks after an assignee was removed")
