import pytest

from mascate_pro.core.exceptions import (
    AuthenticationError, DuplicateNameError, ForbiddenError, NotFoundError, ValidationError,
)
from mascate_pro.core.security import verify_password
from mascate_pro.models.activity_log import ActivityLog
from mascate_pro.services import users as user_service
from tests.conftest import PASSWORD


def actions(db):
    return [a for (a,) in db.query(ActivityLog.action).order_by(ActivityLog.created_at)]


def test_authenticate_updates_last_login(db, staff):
    assert staff.last_login is None

    user = user_service.authenticate(db, "Staff@Mascatepro.com.br ", PASSWORD, "10.0.0.2", "pytest")

    assert user.id == staff.id
    assert user.last_login is not None
    assert actions(db) == ["LOGIN_SUCCESS"]


@pytest.mark.parametrize("email,password", [
    ("staff@mascatepro.com.br", "wrong-password"),
    ("nobody@mascatepro.com.br", PASSWORD),
])
def test_authenticate_rejects_bad_credentials(db, staff, email, password):
    with pytest.raises(AuthenticationError):
        user_service.authenticate(db, email, password)
    assert actions(db) == ["LOGIN_FAILED"]


def test_authenticate_rejects_inactive_user(db, make_user):
    make_user("gone@mascatepro.com.br", active=False)
    with pytest.raises(AuthenticationError):
        user_service.authenticate(db, "gone@mascatepro.com.br", PASSWORD)


def test_authenticate_requires_both_fields(db):
    with pytest.raises(ValidationError):
        user_service.authenticate(db, "", PASSWORD)


def test_create_user_hashes_password(db, superadmin_actor):
    user = user_service.create_user(
        db,
        {"email": "New@Mascatepro.com.br", "password": "abc123", "display_name": "Novo", "role": "admin"},
        superadmin_actor,
    )
    assert user.email == "new@mascatepro.com.br"
    assert user.role == "admin"
    assert user.password_hash != "abc123"
    assert verify_password("abc123", user.password_hash)
    assert "USER_CREATED" in actions(db)


def test_create_user_rejects_duplicate_email(db, staff, superadmin_actor):
    with pytest.raises(DuplicateNameError):
        user_service.create_user(
            db,
            {"email": "STAFF@mascatepro.com.br", "password": "abc123", "display_name": "Copy"},
            superadmin_actor,
        )


def test_create_user_rejects_unknown_role(db, superadmin_actor):
    with pytest.raises(ValidationError):
        user_service.create_user(
            db,
            {"email": "x@mascatepro.com.br", "password": "abc123", "display_name": "X", "role": "owner"},
            superadmin_actor,
        )


def test_update_user(db, staff, superadmin_actor):
    user = user_service.update_user(
        db, staff.id, {"display_name": "Caixa", "role": "admin", "password_hash": "x"}, superadmin_actor
    )
    assert user.display_name == "Caixa"
    assert user.role == "admin"
    assert verify_password(PASSWORD, user.password_hash)


@pytest.mark.parametrize("changes", [{"active": False}, {"role": "user"}, {"role": "admin"}])
def test_cannot_lock_yourself_out(db, superadmin, superadmin_actor, changes):
    with pytest.raises(ForbiddenError):
        user_service.update_user(db, superadmin.id, changes, superadmin_actor)

    db.refresh(superadmin)
    assert superadmin.active is True
    assert superadmin.role == "superadmin"


def test_can_edit_own_profile(db, superadmin, superadmin_actor):
    user = user_service.update_user(db, superadmin.id, {"display_name": "Dono"}, superadmin_actor)
    assert user.display_name == "Dono"


def test_deactivate_user(db, staff, superadmin, superadmin_actor):
    user = user_service.deactivate_user(db, staff.id, superadmin_actor)
    assert user.active is False
    assert "USER_DELETED" in actions(db)

    with pytest.raises(ForbiddenError):
        user_service.deactivate_user(db, superadmin.id, superadmin_actor)


def test_get_missing_user(db):
    with pytest.raises(NotFoundError):
        user_service.get_user(db, "missing")


def test_change_password(db, staff, staff_actor):
    with pytest.raises(ValidationError):
        user_service.change_password(db, staff, "wrong", "newpass1", staff_actor)

    user_service.change_password(db, staff, PASSWORD, "newpass1", staff_actor)
    db.refresh(staff)
    assert verify_password("newpass1", staff.password_hash)
    assert actions(db) == ["PASSWORD_CHANGED"]


def test_reset_password_returns_working_temporary_password(db, staff, superadmin_actor):
    user, temporary = user_service.reset_password(db, staff.id, superadmin_actor)

    assert temporary
    assert verify_password(temporary, user.password_hash)
    assert not verify_password(PASSWORD, user.password_hash)
    assert user_service.authenticate(db, staff.email, temporary).id == staff.id
