"""
Registration, login and account administration tests.

Verifies:
- Only the first administrator (with no approved administrator around) is auto-approved
- Login failures are generic for bad credentials and never open a session
- Email uniqueness and password preservation on edits
"""

import pytest

from pizzadash.services import auth_service, session_service
from pizzadash.services.auth_service import (
    AccountPendingError,
    AccountRejectedError,
    InvalidCredentialsError,
)
from pizzadash.services.permission_service import PermissionDeniedError
from pizzadash.validation import ConflictError, NotFoundError

PASSWORD = "secret123"
ADMIN_EMAIL = "admin@pizza.test"
STAFF_EMAIL = "staff@pizza.test"


# =============================================================================
# REGISTRATION
# =============================================================================


class TestRegister:

    def test_first_administrator_is_approved(self, store):
        user = auth_service.register(store, "Ada Admin", ADMIN_EMAIL, PASSWORD, "administrator")
        assert user.status == "approved"

    def test_second_administrator_is_pending(self, store, admin):
        user = auth_service.register(store, "Otto Admin", "otto@pizza.test", PASSWORD, "administrator")
        assert user.status == "pending"

    def test_staff_is_always_pending(self, store):
        user = auth_service.register(store, "Sam Staff", STAFF_EMAIL, PASSWORD, "staff")
        assert user.status == "pending"

    def test_pending_admin_does_not_block_auto_approval(self, store):
        # A pending administrator is not an approved one
        auth_service.create_user(store, "Pending Admin", "p@pizza.test", PASSWORD, "administrator", status="pending")
        user = auth_service.register(store, "Ada Admin", ADMIN_EMAIL, PASSWORD, "administrator")
        assert user.status == "approved"

    def test_duplicate_email_is_case_insensitive(self, store, admin):
        with pytest.raises(ConflictError):
            auth_service.register(store, "Someone", ADMIN_EMAIL.upper(), PASSWORD, "staff")

    def test_initials_from_first_two_tokens(self, store):
        user = auth_service.register(store, "maria clara souza", "mc@pizza.test", PASSWORD, "staff")
        assert user.initials == "MC"

    def test_pending_registration_notifies_administrators(self, store, admin):
        auth_service.register(store, "Sam Staff", STAFF_EMAIL, PASSWORD, "staff")
        latest = store.notifications[0]
        assert latest.title == "New registration"
        assert latest.target_roles == ("administrator",)

    def test_password_is_hashed(self, store):
        user = auth_service.register(store, "Ada Admin", ADMIN_EMAIL, PASSWORD, "administrator")
        assert user.password_hash != PASSWORD
        assert auth_service.verify_password(PASSWORD, user.password_hash)


# =============================================================================
# LOGIN / SESSION
# =============================================================================


class TestLogin:

    def test_success_records_session(self, store, admin):
        user, token = auth_service.login(store, ADMIN_EMAIL, PASSWORD)
        assert user.id == admin.id
        assert session_service.validate_session(store, token) == admin

    def test_email_match_is_case_insensitive(self, store, admin):
        user, _ = auth_service.login(store, "Admin@Pizza.Test", PASSWORD)
        assert user.id == admin.id

    def test_wrong_password_is_generic_and_opens_no_session(self, store, admin):
        with pytest.raises(InvalidCredentialsError) as exc:
            auth_service.login(store, ADMIN_EMAIL, "wrong-password")
        assert str(exc.value) == "Invalid email or password"
        assert store.session is None

    def test_unknown_email_matches_wrong_password_message(self, store):
        with pytest.raises(InvalidCredentialsError) as exc:
            auth_service.login(store, "ghost@pizza.test", PASSWORD)
        assert str(exc.value) == "Invalid email or password"

    def test_pending_account(self, store, admin):
        auth_service.register(store, "Sam Staff", STAFF_EMAIL, PASSWORD, "staff")
        with pytest.raises(AccountPendingError):
            auth_service.login(store, STAFF_EMAIL, PASSWORD)
        assert store.session is None

    def test_rejected_account(self, store, admin):
        user = auth_service.register(store, "Sam Staff", STAFF_EMAIL, PASSWORD, "staff")
        auth_service.set_user_status(store, user.id, "rejected", admin)
        with pytest.raises(AccountRejectedError):
            auth_service.login(store, STAFF_EMAIL, PASSWORD)

    def test_new_login_replaces_session(self, store, admin, staff):
        _, admin_token = auth_service.login(store, ADMIN_EMAIL, PASSWORD)
        _, staff_token = auth_service.login(store, STAFF_EMAIL, PASSWORD)
        assert session_service.validate_session(store, admin_token) is None
        assert session_service.validate_session(store, staff_token) == staff

    def test_logout_clears_session(self, store, admin):
        _, token = auth_service.login(store, ADMIN_EMAIL, PASSWORD)
        auth_service.logout(store)
        assert session_service.validate_session(store, token) is None

    def test_session_token_is_not_stored_in_plaintext(self, store, admin):
        _, token = auth_service.login(store, ADMIN_EMAIL, PASSWORD)
        assert token not in store.session.values()


# =============================================================================
# ADMINISTRATION
# =============================================================================


class TestUpdateUser:

    def test_email_uniqueness_excludes_self(self, store, admin):
        updated = auth_service.update_user(store, admin.id, {"email": ADMIN_EMAIL})
        assert updated.email == ADMIN_EMAIL

    def test_email_clash_with_other_account(self, store, admin, staff):
        with pytest.raises(ConflictError):
            auth_service.update_user(store, staff.id, {"email": ADMIN_EMAIL})

    def test_blank_password_keeps_credential(self, store, admin):
        updated = auth_service.update_user(store, admin.id, {"name": "Ada Lovelace"}, password="")
        assert updated.password_hash == admin.password_hash
        assert updated.initials == "AL"

    def test_new_password_replaces_credential(self, store, admin):
        auth_service.update_user(store, admin.id, {}, password="brand-new")
        auth_service.login(store, ADMIN_EMAIL, "brand-new")

    def test_unknown_user(self, store):
        with pytest.raises(NotFoundError):
            auth_service.update_user(store, "ghost", {"name": "Ghost"})


class TestUserAdministration:

    def test_approve_pending_account(self, store, admin):
        user = auth_service.register(store, "Sam Staff", STAFF_EMAIL, PASSWORD, "staff")
        approved = auth_service.set_user_status(store, user.id, "approved", admin)
        assert approved.status == "approved"
        auth_service.login(store, STAFF_EMAIL, PASSWORD)

    def test_staff_cannot_change_status(self, store, admin, staff):
        with pytest.raises(PermissionDeniedError):
            auth_service.set_user_status(store, admin.id, "rejected", staff)

    def test_delete_user(self, store, admin, staff):
        auth_service.delete_user(store, staff.id, admin)
        assert store.find("users", staff.id) is None

    def test_cannot_delete_self(self, store, admin):
        with pytest.raises(PermissionDeniedError):
            auth_service.delete_user(store, admin.id, admin)

    def test_deleting_logged_in_user_ends_session(self, store, admin, staff):
        _, token = auth_service.login(store, STAFF_EMAIL, PASSWORD)
        auth_service.delete_user(store, staff.id, admin)
        assert store.session is None
        assert session_service.validate_session(store, token) is None

    def test_rejecting_logged_in_user_invalidates_session(self, store, admin, staff):
        _, token = auth_service.login(store, STAFF_EMAIL, PASSWORD)
        auth_service.set_user_status(store, staff.id, "rejected", admin)
        assert session_service.validate_session(store, token) is None
