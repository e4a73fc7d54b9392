"""
Test cases for the equipment ledger.
"""
from rest_framework import status
from rest_framework.test import APITestCase

from asset.models import Asset, AssetCondition, AssetStatus, AssetUsage
from user.models import Role
from .helpers import future, make_user

ASSETS_URL = '/api/v1/assets/'


def asset_url(asset, suffix=''):
    return f'{ASSETS_URL}{asset.pk}/{suffix}'


class AssetApiTest(APITestCase):

    def setUp(self):
        self.admin = make_user('admin', role=Role.ADMIN)
        self.alice = make_user('alice')
        self.client.force_authenticate(self.admin)

    def _create_asset(self, serial='SN-001', **fields):
        payload = {'name': 'Sony A7 III', 'category': 'camera', 'serial_number': serial}
        payload.update(fields)
        response = self.client.post(ASSETS_URL, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return Asset.objects.get(pk=response.data['data']['asset']['id'])

    def test_create_records_creator(self):
        asset = self._create_asset(brand='Sony', tags=['fullframe'])
        self.assertEqual(asset.created_by, self.admin)
        self.assertEqual(asset.status, AssetStatus.AVAILABLE)
        self.assertEqual(asset.tags, ['fullframe'])

    def test_duplicate_serial_is_rejected(self):
        self._create_asset()
        response = self.client.post(
            ASSETS_URL, {'name': 'Another', 'category': 'lens', 'serial_number': 'SN-001'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['message'], 'Serial number already exists.')

    def test_checkout_and_return_cycle(self):
        asset = self._create_asset()

        response = self.client.post(asset_url(asset, 'assign/'), {
            'user_id': self.alice.pk,
            'purpose': 'Graduation shoot',
            'expected_return_date': future(3).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        body = response.data['data']['asset']
        self.assertEqual(body['status'], AssetStatus.IN_USE)
        self.assertEqual(body['holder_name'], 'Alice')
        self.assertEqual(body['days_in_use'], 1)
        self.assertFalse(body['is_overdue'])

        response = self.client.post(asset_url(asset, 'assign/'), {'user_id': self.alice.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Asset is not available.')

        response = self.client.delete(asset_url(asset))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            asset_url(asset, 'return/'), {'condition': 'fair', 'notes': 'Scratched hood'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        body = response.data['data']['asset']
        self.assertEqual(body['status'], AssetStatus.AVAILABLE)
        self.assertEqual(body['condition'], AssetCondition.FAIR)
        self.assertIsNone(body['current_holder'])

        usage = AssetUsage.objects.get(asset=asset)
        self.assertEqual(usage.purpose, 'Graduation shoot')
        self.assertEqual(usage.condition, AssetCondition.FAIR)
        self.assertIsNotNone(usage.returned_date)
        self.assertEqual(len(body['usage_history']), 1)

    def test_return_requires_checkout(self):
        asset = self._create_asset()
        response = self.client.post(asset_url(asset, 'return/'), {'condition': 'good'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_return_rejects_new_condition(self):
        asset = self._create_asset()
        self.client.post(asset_url(asset, 'assign/'), {'user_id': self.alice.pk}, format='json')
        response = self.client.post(asset_url(asset, 'return/'), {'condition': 'new'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_assign_unknown_user_is_404(self):
        asset = self._create_asset()
        response = self.client.post(asset_url(asset, 'assign/'), {'user_id': 999999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        asset.refresh_from_db()
        self.assertEqual(asset.status, AssetStatus.AVAILABLE)

    def test_repair_moves_to_maintenance(self):
        asset = self._create_asset()
        response = self.client.post(asset_url(asset, 'maintenance/'), {
            'type': 'inspection',
            'description': 'Sensor check',
        }, format='json')
        self.assertEqual(response.data['data']['asset']['status'], AssetStatus.AVAILABLE)

        response = self.client.post(asset_url(asset, 'maintenance/'), {
            'type': 'repair',
            'description': 'Shutter replacement',
            'cost': '120.50',
            'technician': 'Camera Clinic',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        body = response.data['data']['asset']
        self.assertEqual(body['status'], AssetStatus.MAINTENANCE)
        self.assertEqual(len(body['maintenance_history']), 2)
        self.assertEqual(body['maintenance_history'][1]['cost'], '120.50')

    def test_delete_available_asset(self):
        asset = self._create_asset()
        response = self.client.delete(asset_url(asset))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Asset.objects.exists())

    def test_list_filters_and_limits(self):
        self._create_asset('SN-1', name='Tripod', category='tripod')
        self._create_asset('SN-2', name='Camera', category='camera')

        response = self.client.get(ASSETS_URL, {'category': 'tripod'})
        self.assertEqual([a['name'] for a in response.data['data']['assets']], ['Tripod'])

        response = self.client.get(ASSETS_URL, {'sort': 'name'})
        self.assertEqual([a['name'] for a in response.data['data']['assets']], ['Camera', 'Tripod'])

        response = self.client.get(ASSETS_URL, {'limit': 100})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get(ASSETS_URL, {'limit': 101})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats_overview(self):
        self._create_asset('SN-1', category='camera')
        in_use = self._create_asset('SN-2', category='camera')
        self._create_asset('SN-3', category='lens', status='retired')
        self.client.post(asset_url(in_use, 'assign/'), {'user_id': self.alice.pk}, format='json')

        response = self.client.get(f'{ASSETS_URL}stats/overview/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        overview = response.data['data']['overview']
        self.assertEqual(overview, {'total': 3, 'available': 1, 'in_use': 1, 'maintenance': 0, 'retired': 1})
        categories = response.data['data']['category_stats']
        self.assertEqual(categories[0], {'category': 'camera', 'count': 2, 'available': 1, 'in_use': 1})

    def test_members_are_refused(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(ASSETS_URL)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
