import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User
from .conftest import PASSWORD


# =============================================================================
# Registration
# =============================================================================

@pytest.mark.django_db
class TestRegister:
    """Tests for POST /api/auth/register/"""

    def test_creates_user_and_signs_in(self, api_client):
        response = api_client.post(reverse('users:register'), {
            'email': 'Newcomer@Example.com',
            'password': 'LondonPride99',
            'display_name': 'Newcomer',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['email'] == 'newcomer@example.com'
        assert response.data['user']['is_staff'] is False
        assert set(response.data['tokens']) == {'access', 'refresh'}
        assert User.objects.filter(email='newcomer@example.com').exists()

    def test_duplicate_email(self, api_client, drinker):
        response = api_client.post(reverse('users:register'), {
            'email': 'DRINKER@example.com',
            'password': 'LondonPride99',
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'User with this email already exists'

    @pytest.mark.parametrize('payload', [
        {'email': 'short@example.com', 'password': 'ale1'},
        {'email': 'not-an-email', 'password': 'LondonPride99'},
        {'password': 'LondonPride99'},
    ])
    def test_invalid_input(self, api_client, payload):
        response = api_client.post(reverse('users:register'), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not User.objects.exists()


# =============================================================================
# Login
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_token_pair(self, api_client, drinker):
        response = api_client.post(reverse('users:login'), {
            'email': ' Drinker@Example.com ',
            'password': PASSWORD,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Login successful'
        assert 'refresh' in response.data['tokens']

    def test_bad_password(self, api_client, drinker):
        response = api_client.post(reverse('users:login'), {
            'email': drinker.email,
            'password': 'wrong-password',
        }, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_deactivated(self, api_client, closed_account):
        response = api_client.post(reverse('users:login'), {
            'email': closed_account.email,
            'password': PASSWORD,
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_refresh(self, api_client, drinker):
        login = api_client.post(reverse('users:login'), {
            'email': drinker.email,
            'password': PASSWORD,
        }, format='json')

        response = api_client.post(
            reverse('token_refresh'), {'refresh': login.data['tokens']['refresh']}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data


# =============================================================================
# Current user
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET/PATCH /api/auth/me/"""

    def test_profile(self, drinker_client, drinker):
        response = drinker_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_name'] == 'Regular Drinker'

    def test_rename_only(self, drinker_client, drinker):
        response = drinker_client.patch(
            reverse('users:current-user'),
            {'display_name': 'Landlord', 'is_staff': True},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        drinker.refresh_from_db()
        assert drinker.display_name == 'Landlord'
        assert drinker.is_staff is False

    def test_anonymous(self, api_client):
        response = api_client.get(reverse('users:current-user'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
