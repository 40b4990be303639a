from cable_iam.app.services.scope_resolver import resolve_scope
from cable_iam.domain.entities import GlobalRole, SiteRole

from tests.unit.factories import make_user, membership


def test_global_admin_administers_everything():
    scope = resolve_scope(make_user(1, GlobalRole.GLOBAL_ADMIN), [])

    assert scope.is_global_admin
    assert scope.is_admin_anywhere
    assert scope.can_administer(999)
    assert scope.covers([1, 2, 3])
    assert scope.out_of_scope([1, 2]) == set()


def test_site_admin_scope_is_sites_with_admin_role():
    scope = resolve_scope(
        make_user(2),
        [membership(2, 10, SiteRole.SITE_ADMIN), membership(2, 11, SiteRole.SITE_USER)],
    )

    assert not scope.is_global_admin
    assert scope.administered_sites == frozenset({10})
    assert scope.is_admin_anywhere
    assert scope.can_administer(10)
    assert not scope.can_administer(11)
    assert scope.out_of_scope([10, 11, 12]) == {11, 12}


def test_plain_user_has_no_scope():
    scope = resolve_scope(make_user(3), [membership(3, 10)])

    assert not scope.is_admin_anywhere
    assert scope.administered_sites == frozenset()


def test_memberships_of_other_users_are_ignored():
    scope = resolve_scope(make_user(2), [membership(5, 10, SiteRole.SITE_ADMIN)])

    assert scope.administered_sites == frozenset()


def test_shares_site_with():
    scope = resolve_scope(make_user(2), [membership(2, 10, SiteRole.SITE_ADMIN)])

    assert scope.shares_site_with([membership(9, 10)])
    assert not scope.shares_site_with([membership(9, 11)])
    assert not scope.shares_site_with([])
