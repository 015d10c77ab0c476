"""Ownership and role decisions."""

import pytest

from equipment_tracker.core.access import (
    Caller,
    ListScope,
    Role,
    Target,
    UserRef,
    can_access,
    can_delete_user,
    can_manage_users,
    list_scope,
)

OWNER_IDS = [None, 1, 2, 3, 99]


@pytest.mark.parametrize("owner_id", OWNER_IDS)
def test_admin_can_access_every_owner(owner_id):
    admin = Caller(id=2, role=Role.ADMIN)
    assert can_access(admin, Target(owner_id=owner_id)) is True


@pytest.mark.parametrize("owner_id", OWNER_IDS)
def test_user_can_access_only_own_equipment(owner_id):
    user = Caller(id=3, role=Role.USER)
    assert can_access(user, Target(owner_id=owner_id)) is (owner_id == 3)


def test_user_cannot_access_orphaned_equipment():
    assert can_access(Caller(id=1, role="user"), Target(owner_id=None)) is False


def test_list_scope_restricts_users_to_their_own_rows():
    assert list_scope(Caller(id=1, role="user")) == ListScope(restrict_to_owner=1)
    assert list_scope(Caller(id=2, role="admin")) == ListScope(restrict_to_owner=None)


def test_only_admins_manage_users():
    assert can_manage_users(Caller(id=1, role="admin")) is True
    assert can_manage_users(Caller(id=1, role="user")) is False


@pytest.mark.parametrize("role", ["user", "admin"])
def test_nobody_can_delete_themselves(role):
    caller = Caller(id=7, role=role)
    assert can_delete_user(caller, UserRef(id=7)) is False
    assert can_delete_user(caller, UserRef(id=8)) is True


def test_caller_rejects_unknown_role():
    with pytest.raises(ValueError):
        Caller(id=1, role="superuser")
