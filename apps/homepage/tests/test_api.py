import pytest
from django.urls import reverse
from rest_framework import status
from apps.analytics.models import AdminAudit
from apps.homepage.models import HomepageSlot


# =============================================================================
# Public
# =============================================================================

@pytest.mark.django_db
class TestHomepageSlots:
    """Tests for GET /api/homepage/slots/"""

    def test_active_slots_in_order(self, api_client, make_slot):
        make_slot('camden', 'pub-quiz', position=2, score=0.9)
        make_slot('soho', 'cocktails', position=1, score=0.4)
        make_slot('hackney', 'beer-garden', position=3, is_active=False)

        response = api_client.get(reverse('homepage:slots'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['source'] == 'database'
        assert response.data['total'] == 2
        assert [tile['city'] for tile in response.data['tiles']] == ['Soho', 'Camden']
        assert response.data['tiles'][1]['amenity'] == 'Pub Quiz'
        assert response['Cache-Control'] == 'public, s-maxage=300, stale-while-revalidate=600'

    def test_generated_when_none_active(self, api_client, camden_pubs):
        response = api_client.get(reverse('homepage:slots'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['source'] == 'generated'
        assert response.data['total'] == 3
        assert response.data['tiles'][0]['href'].startswith('/area/camden/')


# =============================================================================
# Admin
# =============================================================================

@pytest.mark.django_db
class TestAdminHomepageSlots:
    """Tests for GET/POST /api/admin/homepage-slots/"""

    def test_requires_staff(self, user_client):
        response = user_client.get(reverse('homepage:admin-slots'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_active(self, admin_client, make_slot):
        make_slot('camden', 'pub-quiz')
        make_slot('soho', 'cocktails', is_active=False)

        response = admin_client.get(reverse('homepage:admin-slots'))

        assert response.status_code == status.HTTP_200_OK
        assert [slot['area_slug'] for slot in response.data['slots']] == ['camden']

    def test_invalid_action(self, admin_client):
        response = admin_client.post(reverse('homepage:admin-slots'), {'action': 'shuffle'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid action'

    def test_regenerate(self, admin_client, camden_pubs):
        response = admin_client.post(reverse('homepage:admin-slots'), {'action': 'regenerate'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Homepage slots regenerated successfully'
        assert response.data['source'] == 'scored'
        assert len(response.data['slots']) == 3
        assert AdminAudit.objects.get().action == 'regenerate'

    def test_set_slots(self, admin_client):
        response = admin_client.post(reverse('homepage:admin-slots'), {
            'action': 'set_slots',
            'slots': [
                {'area_slug': 'camden', 'amenity_slug': 'pub-quiz', 'title': 'Quiz Nights in Camden',
                 'href': '/area/camden/pub-quiz', 'icon': '🧠', 'pub_count': 5},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Homepage slots set successfully'
        slot = HomepageSlot.objects.get()
        assert slot.is_active is True
        assert slot.position == 1
        assert slot.icon == '🧠'

    def test_set_slots_validates(self, admin_client):
        response = admin_client.post(reverse('homepage:admin-slots'), {
            'action': 'set_slots',
            'slots': [{'area_slug': 'camden'}],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not HomepageSlot.objects.exists()


@pytest.mark.django_db
class TestAdminSlotCandidates:
    """Tests for GET /api/admin/homepage-slots/candidates/"""

    def test_candidates(self, admin_client, camden_pubs, small_area_pubs):
        response = admin_client.get(reverse('homepage:admin-candidates'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['candidates']) == 3
        assert {c['area_slug'] for c in response.data['candidates']} == {'camden'}


# =============================================================================
# Cron
# =============================================================================

@pytest.mark.django_db
class TestCronRegenerateSlots:
    """Tests for GET|POST /api/cron/regenerate-slots/"""

    def test_requires_secret(self, api_client):
        response = api_client.get(reverse('homepage:cron-regenerate'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_regenerates(self, cron_client, camden_pubs):
        response = cron_client.post(reverse('homepage:cron-regenerate'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3
        assert HomepageSlot.objects.filter(is_active=True).count() == 3
