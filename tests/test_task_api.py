"""
Test cases for the task endpoints.
"""
from datetime import timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from task.models import AssignmentStatus, Status, Task
from user.models import Role
from .helpers import future, make_task, make_user, make_work

TASKS_URL = '/api/v1/tasks/'


def task_url(task, suffix=''):
    return f'{TASKS_URL}{task.pk}/{suffix}'


class TaskWorkflowScenarioTest(APITestCase):

    def setUp(self):
        self.admin = make_user('admin', role=Role.ADMIN)
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.carol = make_user('carol')

    def _create(self, **payload):
        body = {
            'title': 'Autumn campus',
            'description': 'Colours of the season around campus.',
            'type': 'photo',
            'deadline': future().isoformat(),
        }
        body.update(payload)
        self.client.force_authenticate(self.admin)
        response = self.client.post(TASKS_URL, body, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return Task.objects.get(pk=response.data['data']['task']['id'])

    def test_submission_and_removal_update_completion_rate(self):
        task = self._create(assigned_to=[self.alice.pk, self.bob.pk])
        self.assertEqual(task.status, Status.DRAFT)
        self.assertEqual(task.completion_rate, 0)

        work = make_work(self.alice)
        self.client.force_authenticate(self.alice)
        response = self.client.post(task_url(task, 'submit/'), {'work_id': work.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        body = response.data['data']['task']
        self.assertEqual(body['completion_rate'], 50)
        self.assertEqual(body['submission_count'], 1)
        self.assertEqual(body['submitted_count'], 1)

        self.client.force_authenticate(self.admin)
        response = self.client.delete(task_url(task, f'assignments/{self.bob.pk}/'))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        body = response.data['data']['task']
        self.assertEqual(body['completion_rate'], 100)
        self.assertEqual([a['user']['id'] for a in body['assigned_to']], [self.alice.pk])

    def test_manual_completion_without_work(self):
        task = self._create()
        self.assertEqual(task.completion_rate, 0)

        response = self.client.post(task_url(task, 'assign/'), {'user_ids': [self.carol.pk]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data['data']['task']['completion_rate'], 0)

        response = self.client.patch(
            task_url(task, f'assignments/{self.carol.pk}/'),
            {'status': AssignmentStatus.COMPLETED},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        body = response.data['data']['task']
        self.assertEqual(body['completion_rate'], 100)
        self.assertEqual(body['submission_count'], 0)

    def test_inactive_assignee_rejects_whole_request(self):
        task = self._create(assigned_to=[self.alice.pk])
        inactive = make_user('dave', is_active=False)

        response = self.client.post(
            task_url(task, 'assign/'), {'user_ids': [self.bob.pk, inactive.pk]}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(
            list(task.assignments.values_list('user_id', flat=True)), [self.alice.pk]
        )

    def test_reassigning_keeps_existing_progress(self):
        task = self._create(assigned_to=[self.alice.pk])
        self.client.patch(
            task_url(task, f'assignments/{self.alice.pk}/'),
            {'status': AssignmentStatus.IN_PROGRESS, 'feedback': 'Keep going'},
            format='json',
        )

        response = self.client.post(
            task_url(task, 'assign/'), {'user_ids': [self.alice.pk, self.bob.pk]}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        assigned = response.data['data']['task']['assigned_to']
        self.assertEqual([a['user']['id'] for a in assigned], [self.alice.pk, self.bob.pk])
        self.assertEqual(assigned[0]['status'], AssignmentStatus.IN_PROGRESS)
        self.assertEqual(assigned[0]['feedback'], 'Keep going')


class TaskCreateValidationTest(APITestCase):

    def setUp(self):
        self.admin = make_user('admin', role=Role.ADMIN)
        self.client.force_authenticate(self.admin)

    def _payload(self, **overrides):
        payload = {
            'title': 'Portrait week',
            'description': 'One portrait a day.',
            'type': 'photo',
            'deadline': future().isoformat(),
        }
        payload.update(overrides)
        return payload

    def test_past_deadline_is_rejected(self):
        past = (timezone.now() - timedelta(hours=1)).isoformat()
        response = self.client.post(TASKS_URL, self._payload(deadline=past), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'deadline')
        self.assertFalse(Task.objects.exists())

    def test_status_is_ignored_on_create(self):
        response = self.client.post(TASKS_URL, self._payload(status='published'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['task']['status'], Status.DRAFT)

    def test_requirements_bounds(self):
        response = self.client.post(
            TASKS_URL,
            self._payload(requirements={'min_files': 4, 'max_files': 2}),
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            TASKS_URL,
            self._payload(requirements={'min_files': 2, 'max_files': 6, 'specifications': 'RAW only'}),
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(
            response.data['data']['task']['requirements'],
            {'min_files': 2, 'max_files': 6, 'specifications': 'RAW only'},
        )

    def test_member_cannot_create(self):
        self.client.force_authenticate(make_user('alice'))
        response = self.client.post(TASKS_URL, self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_gets_401(self):
        self.client.force_authenticate(None)
        response = self.client.get(TASKS_URL)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_update_keeps_unchanged_past_deadline(self):
        task = make_task(self.admin)
        Task.objects.filter(pk=task.pk).update(deadline=timezone.now() - timedelta(days=1))
        task.refresh_from_db()

        response = self.client.patch(
            task_url(task), {'deadline': task.deadline.isoformat(), 'title': 'Renamed'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data['data']['task']['title'], 'Renamed')

    def test_update_rejects_assigned_to(self):
        task = make_task(self.admin)
        response = self.client.patch(task_url(task), {'assigned_to': [1]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TaskVisibilityTest(APITestCase):

    def setUp(self):
        self.admin = make_user('admin', role=Role.ADMIN)
        self.alice = make_user('alice')
        self.bob = make_user('bob')

        self.mine = make_task(self.admin, assigned_to=[self.alice], title='Mine')
        self.theirs = make_task(self.admin, assigned_to=[self.bob], title='Theirs')
        self.public = make_task(self.admin, title='Open call', is_public=True)
        self.draft = make_task(self.admin, assigned_to=[self.alice], title='Draft')
        for task in (self.mine, self.theirs, self.public):
            task.publish()

    def _titles(self, response):
        return [t['title'] for t in response.data['data']['tasks']]

    def test_member_list_is_restricted(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(TASKS_URL)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(set(self._titles(response)), {'Mine', 'Open call'})
        self.assertEqual(response.data['data']['pagination']['total_count'], 2)

    def test_member_cannot_read_other_assignment(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(task_url(self.theirs))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(task_url(self.public))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_status_filter_is_ignored_for_members(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(TASKS_URL, {'status': 'draft'})
        self.assertEqual(set(self._titles(response)), {'Mine', 'Open call'})

    def test_status_filter_applies_for_admins(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(TASKS_URL, {'status': 'draft'})
        self.assertEqual(self._titles(response), ['Draft'])

    def test_assigned_to_me(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(TASKS_URL, {'assigned_to_me': 'true'})
        self.assertEqual(self._titles(response), ['Mine'])

    def test_plain_user_cannot_list(self):
        self.client.force_authenticate(make_user('guest', role=Role.USER))
        response = self.client.get(TASKS_URL)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_priority_ordering(self):
        Task.objects.filter(pk=self.public.pk).update(priority='urgent')
        Task.objects.filter(pk=self.mine.pk).update(priority='low')
        self.client.force_authenticate(self.alice)
        response = self.client.get(TASKS_URL)
        self.assertEqual(self._titles(response), ['Open call', 'Mine'])

    def test_limit_out_of_range(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(TASKS_URL, {'limit': 0})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TaskAssignmentEndpointTest(APITestCase):

    def setUp(self):
        self.admin = make_user('admin', role=Role.ADMIN)
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.task = make_task(self.admin, assigned_to=[self.alice])
        self.task.publish()

    def test_patch_missing_assignment_is_404(self):
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            task_url(self.task, f'assignments/{self.bob.pk}/'),
            {'status': AssignmentStatus.COMPLETED},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_submit_by_unassigned_member_is_403(self):
        work = make_work(self.bob)
        self.client.force_authenticate(self.bob)
        response = self.client.post(task_url(self.task, 'submit/'), {'work_id': work.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'You are not assigned to this task.')

    def test_submit_foreign_work_is_404(self):
        work = make_work(self.bob)
        self.client.force_authenticate(self.alice)
        response = self.client.post(task_url(self.task, 'submit/'), {'work_id': work.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.task.refresh_from_db()
        self.assertEqual(self.task.submission_count, 0)

    def test_status_actions(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(task_url(self.task, 'complete/'))
        self.assertEqual(response.data['data']['task']['status'], Status.COMPLETED)
        response = self.client.post(task_url(self.task, 'cancel/'))
        self.assertEqual(response.data['data']['task']['status'], Status.CANCELLED)

    def test_delete_task_keeps_submitted_work(self):
        work = make_work(self.alice)
        self.client.force_authenticate(self.alice)
        self.client.post(task_url(self.task, 'submit/'), {'work_id': work.pk}, format='json')

        self.client.force_authenticate(self.admin)
        response = self.client.delete(task_url(self.task))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        work.refresh_from_db()
        self.assertIsNone(work.related_task)

    def test_stats_overview(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(f'{TASKS_URL}stats/overview/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stats = response.data['data']['stats']
        self.assertEqual(stats['total_tasks'], 1)
        self.assertEqual(stats['published_tasks'], 1)
        self.assertEqual(stats['total_assignments'], 1)
