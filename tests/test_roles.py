from hallpass.core.config import Settings
from hallpass.core.roles import RolePolicy


def test_exact_teacher_email_wins():
    policy = RolePolicy(teacher_emails=("ms.rivera@gmail.com",))
    assert policy.infer("Ms.Rivera@Gmail.com ") == "teacher"
    assert policy.infer("someone@gmail.com") == "parent"


def test_markers_from_settings():
    settings = Settings(teacher_emails="", teacher_email_markers=".edu,.k12.,teacher")
    policy = RolePolicy.from_settings(settings)

    assert policy.infer("jdoe@lincoln.edu") == "teacher"
    assert policy.infer("jdoe@lincoln.k12.ca.us") == "teacher"
    assert policy.infer("best.teacher@mail.com") == "teacher"
    assert policy.infer("mom@mail.com") == "parent"


def test_domain_marker_does_not_match_local_part():
    policy = RolePolicy(teacher_markers=(".edu",))
    assert policy.infer("jane.educator@mail.com") == "parent"


def test_without_rules_everyone_is_a_parent():
    assert RolePolicy().infer("principal@school.org") == "parent"


def test_seed_staff_role_resolution():
    import pytest

    from scripts.seed_staff import resolve_role

    policy = RolePolicy(teacher_markers=(".edu",))
    assert resolve_role("admin", None, policy) == "admin"
    assert resolve_role(None, "kim@lincoln.edu", policy) == "teacher"
    with pytest.raises(SystemExit):
        resolve_role(None, "kim@mail.com", policy)
