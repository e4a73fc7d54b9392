"""
Test cases for the admin dashboard endpoints.
"""
from datetime import timedelta

from django.test import SimpleTestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from dashboard.adapters.viewsets.dashboard_count_card_viewset import DashboardViewset
from task.models import Status, Task
from user.models import Role
from .helpers import make_task, make_user, make_work

DASHBOARD_URL = '/api/v1/dashboard/'


class CalculateTrendTest(SimpleTestCase):

    def setUp(self):
        self.view = DashboardViewset()

    def test_from_zero(self):
        self.assertEqual(self.view._calculate_trend(0, 0), {'percentage': 0, 'trend': 'steady'})
        self.assertEqual(self.view._calculate_trend(3, 0), {'percentage': 100, 'trend': 'growing'})
        self.assertEqual(self.view._calculate_trend(3, 0, inverse=True), {'percentage': 100, 'trend': 'declining'})

    def test_small_changes_are_steady(self):
        self.assertEqual(self.view._calculate_trend(104, 100)['trend'], 'steady')

    def test_decline(self):
        self.assertEqual(self.view._calculate_trend(5, 10), {'percentage': 50.0, 'trend': 'declining'})
        self.assertEqual(self.view._calculate_trend(5, 10, inverse=True)['trend'], 'growing')


class DashboardApiTest(APITestCase):

    def setUp(self):
        self.admin = make_user('admin', role=Role.ADMIN)
        self.alice = make_user('alice')
        self.client.force_authenticate(self.admin)

        self.live = make_task(self.admin, assigned_to=[self.alice], priority='high')
        self.live.publish()
        self.late = Task.objects.create(
            title='Late',
            description='Missed it',
            type='photo',
            creator=self.admin,
            status=Status.PUBLISHED,
            priority='urgent',
            deadline=timezone.now() - timedelta(days=2),
        )
        make_task(self.admin, priority='low').cancel()

    def test_status_distribution_reports_overdue(self):
        response = self.client.get(f'{DASHBOARD_URL}task-status-distribution/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        counts = {row['display_status']: row['count'] for row in response.data['data']['status_distribution']}
        self.assertEqual(counts, {'cancelled': 1, 'overdue': 1, 'published': 1})

    def test_priority_distribution_skips_cancelled(self):
        response = self.client.get(f'{DASHBOARD_URL}task-priority-distribution/')
        counts = {row['priority']: row['count'] for row in response.data['data']['priority_distribution']}
        self.assertEqual(counts, {'high': 1, 'urgent': 1})

    def test_due_tasks(self):
        response = self.client.get(f'{DASHBOARD_URL}due-tasks/')
        titles = [task['title'] for task in response.data['data']['due_tasks']]
        self.assertEqual(titles, ['Late'])

    def test_dashboard_cards(self):
        make_work(self.alice)
        response = self.client.get(f'{DASHBOARD_URL}dashboard_data/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['works_submitted']['count'], 1)
        self.assertEqual(data['overdue_tasks']['count'], 1)
        self.assertEqual(
            set(data['velocity']['comparison']),
            {'previous_period', 'difference', 'percentage', 'trend'},
        )

    def test_members_are_refused(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(f'{DASHBOARD_URL}task-status-distribution/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
