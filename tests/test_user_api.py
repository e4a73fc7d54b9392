"""
Test cases for the user management endpoints.
"""
from rest_framework import status
from rest_framework.test import APITestCase

from django.contrib.auth.models import User

from task import services
from task.models import AssignmentStatus, Task
from user.models import Role
from work.models import ReviewStatus, Work
from .helpers import make_task, make_user, make_work

USERS_URL = '/api/v1/users/'


def user_url(user, suffix=''):
    return f'{USERS_URL}{user.pk}/{suffix}'


class UserAdminTest(APITestCase):

    def setUp(self):
        self.admin = make_user('admin', role=Role.ADMIN)
        self.alice = make_user('alice')
        self.bob = make_user('bob', role=Role.USER)
        self.client.force_authenticate(self.admin)

    def test_list_with_search_and_role_filter(self):
        response = self.client.get(USERS_URL, {'search': 'ali'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        usernames = [u['username'] for u in response.data['data']['users']]
        self.assertEqual(usernames, ['alice'])

        response = self.client.get(USERS_URL, {'role': 'user'})
        usernames = [u['username'] for u in response.data['data']['users']]
        self.assertEqual(usernames, ['bob'])

    def test_member_cannot_list(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(USERS_URL)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_creates_user_with_role(self):
        response = self.client.post(USERS_URL, {
            'username': 'carol',
            'email': 'carol@example.com',
            'password': 'lens2024',
            'real_name': 'Carol',
            'role': 'member',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        profile = response.data['data']['user']['profile']
        self.assertEqual(profile['role'], Role.MEMBER)
        self.assertEqual(profile['real_name'], 'Carol')
        self.assertEqual(User.objects.get(username='carol').profile.role, Role.MEMBER)

    def test_disable_and_enable(self):
        response = self.client.put(user_url(self.alice, 'status/'), {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.alice.refresh_from_db()
        self.assertFalse(self.alice.is_active)

        response = self.client.put(user_url(self.alice, 'status/'), {'is_active': True}, format='json')
        self.assertEqual(response.data['message'], 'User account enabled')

    def test_status_must_be_boolean(self):
        response = self.client.put(user_url(self.alice, 'status/'), {'is_active': 'false'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.alice.refresh_from_db()
        self.assertTrue(self.alice.is_active)

    def test_cannot_disable_self(self):
        response = self.client.put(user_url(self.admin, 'status/'), {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_change_role(self):
        response = self.client.put(user_url(self.bob, 'role/'), {'role': 'member'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['profile']['role'], Role.MEMBER)

        response = self.client.put(user_url(self.bob, 'role/'), {'role': 'owner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_change_own_role(self):
        response = self.client.put(user_url(self.admin, 'role/'), {'role': 'member'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_removes_works(self):
        make_work(self.alice)
        make_work(self.alice, status=ReviewStatus.PENDING)

        response = self.client.delete(user_url(self.alice))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['deleted_works_count'], 2)
        self.assertFalse(User.objects.filter(username='alice').exists())
        self.assertFalse(Work.objects.exists())

    def test_delete_recomputes_completion_rate_of_assigned_tasks(self):
        carol = make_user('carol')
        task = make_task(self.admin, assigned_to=[self.alice, carol])
        services.update_assignment_status(task, self.alice.pk, AssignmentStatus.COMPLETED)
        task.refresh_from_db()
        self.assertEqual(task.completion_rate, 50)

        response = self.client.delete(user_url(self.alice))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        task.refresh_from_db()
        self.assertEqual(list(task.assignments.values_list('user_id', flat=True)), [carol.pk])
        self.assertEqual(task.completion_rate, 0)

    def test_delete_keeps_tasks_created_by_the_user(self):
        other_admin = make_user('deputy', role=Role.ADMIN)
        task = make_task(other_admin, assigned_to=[self.alice])
        task.publish()

        response = self.client.delete(user_url(other_admin))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        task.refresh_from_db()
        self.assertIsNone(task.creator)
        self.assertEqual(task.assignments.count(), 1)

        response = self.client.get(f'/api/v1/tasks/{task.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['data']['task']['creator'])
        self.assertEqual(Task.objects.count(), 1)


class PublicProfileTest(APITestCase):

    def setUp(self):
        self.alice = make_user('alice')
        make_work(self.alice, views=10, likes=3)
        make_work(self.alice, status=ReviewStatus.PENDING, views=1)
        make_work(self.alice, status=ReviewStatus.REJECTED)

    def test_profile_hides_email(self):
        response = self.client.get(user_url(self.alice, 'profile/'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.data['data']['user']
        self.assertEqual(body['username'], 'alice')
        self.assertNotIn('email', body)

    def test_works_lists_approved_public_only(self):
        response = self.client.get(user_url(self.alice, 'works/'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['works']), 1)

    def test_stats(self):
        response = self.client.get(user_url(self.alice, 'stats/'))
        stats = response.data['data']['stats']
        self.assertEqual(stats['total_works'], 3)
        self.assertEqual(stats['approved_works'], 1)
        self.assertEqual(stats['pending_works'], 1)
        self.assertEqual(stats['rejected_works'], 1)
        self.assertEqual(stats['total_views'], 11)
        self.assertEqual(stats['total_likes'], 3)

    def test_unknown_user_is_404(self):
        response = self.client.get(f'{USERS_URL}999999/profile/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])
