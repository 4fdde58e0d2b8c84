import pytest

from exports.permissions import ROLE_POLICIES, can


@pytest.mark.parametrize('role', ['admin', 'receptionist', 'cashier', 'dentist'])
def test_roles_that_may_export(role):
    assert can(role, 'exports', 'create')


@pytest.mark.parametrize('role', ['doctor', 'nurse', 'lab_tech', 'radiologist', 'pharmacist', 'visitor', None])
def test_roles_that_may_not_export(role):
    assert not can(role, 'exports', 'create')


def test_only_admins_delete_exports():
    assert [r for r in ROLE_POLICIES if can(r, 'exports', 'delete')] == ['admin']
