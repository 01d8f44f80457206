import pytest
from apps.accounts.services import (
    register_user,
    authenticate_user,
    token_pair,
    DuplicateEmailError,
    InvalidCredentialsError,
    InactiveAccountError,
)
from .conftest import PASSWORD


@pytest.mark.django_db
class TestRegisterUser:

    def test_display_name_defaults_to_email_prefix(self):
        user = register_user(email='  Bar.Fly@Example.com ', password='LondonPride99')

        assert user.email == 'bar.fly@example.com'
        assert user.display_name == 'bar.fly'
        assert user.check_password('LondonPride99')

    def test_duplicate(self, drinker):
        with pytest.raises(DuplicateEmailError):
            register_user(email='drinker@EXAMPLE.com', password='LondonPride99')


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_stamps_last_login(self, drinker):
        assert drinker.last_login is None

        user = authenticate_user(email='DRINKER@example.com', password=PASSWORD)

        assert user == drinker
        assert user.last_login is not None

    @pytest.mark.parametrize('email,password', [
        ('drinker@example.com', 'nope'),
        ('nobody@example.com', PASSWORD),
    ])
    def test_bad_credentials(self, drinker, email, password):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=email, password=password)

    def test_inactive_only_after_password_check(self, closed_account):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=closed_account.email, password='nope')
        with pytest.raises(InactiveAccountError):
            authenticate_user(email=closed_account.email, password=PASSWORD)

    def test_token_pair(self, drinker):
        tokens = token_pair(drinker)
        assert tokens['access'] != tokens['refresh']
