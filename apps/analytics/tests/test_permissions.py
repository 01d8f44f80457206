"""
Tests for analytics permission classes.
"""
import pytest
from unittest.mock import Mock
from apps.analytics.permissions import CanViewPubAnalytics
from apps.managers.services import PubManagerSession


@pytest.fixture
def session(island_queen, narrow_boat):
    return PubManagerSession(
        email='landlord@islandqueen.co.uk',
        pub=island_queen,
        pubs=[island_queen, narrow_boat],
    )


def _request(user, query_params=None):
    request = Mock()
    request.user = user
    request.query_params = query_params or {}
    return request


def _view(kwargs=None):
    view = Mock()
    view.kwargs = kwargs or {}
    return view


@pytest.mark.django_db
class TestCanViewPubAnalytics:
    """Test CanViewPubAnalytics permission class."""

    def test_no_pub_id_allows_access(self, session):
        permission = CanViewPubAnalytics()
        assert permission.has_permission(_request(session), _view()) is True

    def test_all_allows_access(self, session):
        permission = CanViewPubAnalytics()
        request = _request(session, {'pub_id': 'all'})
        assert permission.has_permission(request, _view()) is True

    def test_linked_pub_allowed_via_query_params(self, session, narrow_boat):
        permission = CanViewPubAnalytics()
        request = _request(session, {'pub_id': str(narrow_boat.id)})
        assert permission.has_permission(request, _view()) is True

    def test_pub_allowed_via_url_kwargs(self, session, island_queen):
        permission = CanViewPubAnalytics()
        view = _view({'pub_id': str(island_queen.id)})
        assert permission.has_permission(_request(session), view) is True

    def test_unmanaged_pub_denied(self, session, charles_lamb):
        permission = CanViewPubAnalytics()
        request = _request(session, {'pub_id': str(charles_lamb.id)})
        assert permission.has_permission(request, _view()) is False

    def test_site_user_denied(self, site_user):
        """A regular logged-in user is not a pub manager."""
        permission = CanViewPubAnalytics()
        assert permission.has_permission(_request(site_user), _view()) is False
