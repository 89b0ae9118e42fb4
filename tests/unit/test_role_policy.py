import pytest

from alumni_hub.domain.entities.profile import Role
from alumni_hub.domain.services.role_policy import SELF_SERVICE, UNRESTRICTED, get_policy


def test_unrestricted_permits_every_claim():
    for current in (None, *Role):
        for requested in Role:
            assert UNRESTRICTED.permits(current, requested)


@pytest.mark.parametrize(
    "current,requested,expected",
    [
        (None, Role.STUDENT, True),
        (None, Role.RECRUITER, True),
        (None, Role.ADMIN, False),
        (Role.ALUMNI, Role.STUDENT, True),
        (Role.STUDENT, Role.RECRUITER, False),
        (Role.STUDENT, Role.ALUMNI, False),
        (Role.ALUMNI, Role.RECRUITER, False),
        (Role.RECRUITER, Role.STUDENT, True),
        (Role.ALUMNI, Role.ADMIN, False),
        (Role.ADMIN, Role.STUDENT, False),
        (Role.ADMIN, Role.ADMIN, True),
    ],
)
def test_self_service_keeps_admin_and_gated_roles_out_of_reach(current, requested, expected):
    assert SELF_SERVICE.permits(current, requested) is expected


def test_get_policy():
    assert get_policy("self_service") is SELF_SERVICE
    assert get_policy(" Unrestricted ") is UNRESTRICTED
    with pytest.raises(ValueError):
        get_policy("anything-goes")
