from datetime import timedelta

from django.utils import timezone
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from task.models import AssignmentStatus, Status, Task, TaskAssignment
from user.permission import IsAdminRole
from utils.response import envelope
from work.models import Work


class DashboardViewset(viewsets.ViewSet):
    permission_classes = [IsAuthenticated, IsAdminRole]

    @action(detail=False, methods=['get'])
    def dashboard_data(self, request):
        """
        Get comprehensive dashboard data with comparisons and trends
        """
        today = timezone.localdate()

        # Calculate date ranges
        current_month_start = today.replace(day=1)
        last_month_start = (current_month_start - timedelta(days=1)).replace(day=1)
        last_month_end = current_month_start - timedelta(days=1)

        current_week_start = today - timedelta(days=today.weekday())
        last_week_start = current_week_start - timedelta(days=7)
        last_week_end = current_week_start - timedelta(days=1)

        # 1. Works submitted
        works_submitted = self._get_works_submitted(
            today, current_month_start, last_month_start, last_month_end
        )

        # 2. Tasks completed
        tasks_completed = self._get_completed_tasks(
            today, current_week_start, last_week_start, last_week_end
        )

        # 3. Overdue tasks
        overdue_tasks = self._get_overdue_tasks(current_week_start)

        # 4. Submission velocity
        velocity = self._get_submission_velocity(
            today, current_week_start, last_week_start, last_week_end
        )

        return envelope(data={
            'works_submitted': works_submitted,
            'tasks_completed': tasks_completed,
            'overdue_tasks': overdue_tasks,
            'velocity': velocity,
        })

    def _comparison(self, current, previous, inverse=False):
        trend_data = self._calculate_trend(current, previous, inverse=inverse)
        return {
            'previous_period': previous,
            'difference': round(current - previous, 2),
            'percentage': trend_data['percentage'],
            'trend': trend_data['trend'],
        }

    def _get_works_submitted(self, today, current_month_start, last_month_start, last_month_end):
        """
        Works uploaded this month compared with the whole of last month
        """
        current_count = Work.objects.filter(
            created_at__date__gte=current_month_start,
            created_at__date__lte=today
        ).count()

        last_month_count = Work.objects.filter(
            created_at__date__gte=last_month_start,
            created_at__date__lte=last_month_end
        ).count()

        return {
            'count': current_count,
            'comparison': self._comparison(current_count, last_month_count),
        }

    def _get_completed_tasks(self, today, current_week_start, last_week_start, last_week_end):
        """
        Tasks moved to completed this week compared with last week
        """
        current_count = Task.objects.filter(
            status=Status.COMPLETED,
            updated_at__date__gte=current_week_start,
            updated_at__date__lte=today
        ).count()

        last_week_count = Task.objects.filter(
            status=Status.COMPLETED,
            updated_at__date__gte=last_week_start,
            updated_at__date__lte=last_week_end
        ).count()

        return {
            'count': current_count,
            'comparison': self._comparison(current_count, last_week_count),
        }

    def _get_overdue_tasks(self, current_week_start):
        """
        Published tasks past their deadline, compared with those already overdue
        at the start of this week
        """
        published = Task.objects.filter(status=Status.PUBLISHED)
        current_count = published.filter(deadline__lt=timezone.now()).count()
        last_week_count = published.filter(deadline__date__lt=current_week_start).count()

        # For overdue tasks declining is good, so the trend is inverted
        return {
            'count': current_count,
            'comparison': self._comparison(current_count, last_week_count, inverse=True),
        }

    def _get_submission_velocity(self, today, current_week_start, last_week_start, last_week_end):
        """
        Average task submissions per day this week compared with last week
        """
        submitted = TaskAssignment.objects.filter(status=AssignmentStatus.SUBMITTED)

        current_week_days = (today - current_week_start).days + 1
        current_submitted = submitted.filter(
            submitted_at__date__gte=current_week_start,
            submitted_at__date__lte=today
        ).count()
        current_velocity = round(current_submitted / current_week_days, 2)

        last_week_submitted = submitted.filter(
            submitted_at__date__gte=last_week_start,
            submitted_at__date__lte=last_week_end
        ).count()
        last_week_velocity = round(last_week_submitted / 7, 2)

        return {
            'velocity': current_velocity,
            'comparison': self._comparison(float(current_velocity), float(last_week_velocity)),
        }

    def _calculate_trend(self, current, previous, inverse=False):
        """
        Calculate percentage change and trend direction

        Args:
            current: Current period value
            previous: Previous period value
            inverse: If True, declining values are considered positive (for overdue tasks)

        Returns:
            dict with percentage and trend (growing/declining/steady)
        """
        if previous == 0:
            if current == 0:
                percentage = 0
                trend = 'steady'
            else:
                percentage = 100
                trend = 'declining' if inverse else 'growing'
        else:
            percentage = round(((current - previous) / previous) * 100, 2)

            if percentage > 5:
                trend = 'declining' if inverse else 'growing'
            elif percentage < -5:
                trend = 'growing' if inverse else 'declining'
            else:
                trend = 'steady'

        return {
            'percentage': abs(percentage),
            'trend': trend
        }
