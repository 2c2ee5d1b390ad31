"""SQLite-backed tests for app.services.users: create, read, update, patch, delete."""

import unittest
from unittest.mock import patch

from sqlalchemy.orm import sessionmaker

from app.core.database import build_engine
from app.core.security import PasswordHasher
from app.models import Base, Role, RoleKind, User
from app.schemas.users import (
    CreateUserRequest,
    PartialUpdateUserRequest,
    UpdateUserRequest,
)
from app.services.errors import (
    InvalidRoleKindError,
    PreconditionFailedError,
    UserAccessDeniedError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from app.services.users import UserService

ADMIN = "admin"


class UserServiceTestCase(unittest.TestCase):
    """Fresh in-memory database and service per test, with alice already created."""

    def setUp(self) -> None:
        engine = build_engine("sqlite://")
        Base.metadata.create_all(engine)
        self.session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
        self.hasher = PasswordHasher(rounds=4)
        self.service = UserService(self.session, hasher=self.hasher, admin_username=ADMIN)
        self.alice = self.service.create_user(
            CreateUserRequest(username="alice", password="p@ss1234", first_name="Alice")
        )

    def tearDown(self) -> None:
        self.session.close()

    def _stored(self, user_id: int) -> User:
        """Re-read a user from the database, bypassing the identity map."""
        self.session.rollback()
        self.session.expire_all()
        return self.session.get(User, user_id)


class TestCreateUser(UserServiceTestCase):
    def test_create_assigns_id_and_hashes_password(self) -> None:
        stored = self._stored(self.alice.id)
        self.assertIsNotNone(stored.id)
        self.assertEqual(stored.username, "alice")
        self.assertEqual(stored.first_name, "Alice")
        self.assertIsNone(stored.last_name)
        self.assertNotEqual(stored.password, "p@ss1234")
        self.assertTrue(self.hasher.matches("p@ss1234", stored.password))

    def test_create_defaults_to_standard_role(self) -> None:
        self.assertEqual(self._stored(self.alice.id).role_names, ["ROLE_USER"])

    def test_create_then_get_round_trip(self) -> None:
        created = self.service.create_user(
            CreateUserRequest(
                username="bob",
                password="b0b-secret",
                first_name="Bob",
                last_name="Builder",
                roles={RoleKind.ROLE_ADMIN, RoleKind.ROLE_USER},
            )
        )
        fetched = self.service.get_user_by_id(created.id)
        self.assertEqual(fetched.username, "bob")
        self.assertEqual(fetched.first_name, "Bob")
        self.assertEqual(fetched.last_name, "Builder")
        self.assertEqual(fetched.role_names, ["ROLE_ADMIN", "ROLE_USER"])
        self.assertNotEqual(fetched.password, "b0b-secret")

    def test_duplicate_username_raises(self) -> None:
        with self.assertRaises(UserAlreadyExistsError) as ctx:
            self.service.create_user(
                CreateUserRequest(username="alice", password="other-pass", last_name="X")
            )
        self.assertNotIn("other-pass", ctx.exception.message)
        self.assertEqual(self.session.query(User).count(), 1)

    def test_lost_race_on_unique_constraint_raises_already_exists(self) -> None:
        # Pre-check passes (as if the competing insert had not committed yet).
        with patch.object(UserService, "_find_by_username", return_value=None):
            with self.assertRaises(UserAlreadyExistsError):
                self.service.create_user(
                    CreateUserRequest(username="alice", password="p@ss5678")
                )
        self.assertEqual(self.session.query(User).count(), 1)

    def test_request_repr_hides_password(self) -> None:
        request = CreateUserRequest(username="carol", password="c4rol-pass")
        self.assertNotIn("c4rol-pass", repr(request))

    def test_roles_shared_between_users(self) -> None:
        self.service.create_user(CreateUserRequest(username="bob", password="b0b-secret"))
        self.assertEqual(self.session.query(Role).count(), 1)


class TestGetUsers(UserServiceTestCase):
    def test_get_missing_user_raises_not_found(self) -> None:
        with self.assertRaises(UserNotFoundError) as ctx:
            self.service.get_user_by_id(999)
        self.assertEqual(ctx.exception.user_id, 999)

    def test_get_all_users_ordered_by_id(self) -> None:
        bob = self.service.create_user(CreateUserRequest(username="bob", password="b0b-secret"))
        users = self.service.get_all_users()
        self.assertEqual([u.id for u in users], [self.alice.id, bob.id])


class TestUpdateUser(UserServiceTestCase):
    def test_owner_partial_update_last_name_only(self) -> None:
        password_hash = self._stored(self.alice.id).password
        self.service.partial_update_user(
            self.alice.id, PartialUpdateUserRequest(last_name="Doe"), "alice"
        )
        stored = self._stored(self.alice.id)
        self.assertEqual(stored.first_name, "Alice")
        self.assertEqual(stored.last_name, "Doe")
        self.assertEqual(stored.username, "alice")
        self.assertEqual(stored.password, password_hash)

    def test_admin_may_update_any_user(self) -> None:
        self.service.update_user(
            self.alice.id,
            UpdateUserRequest(username="alice", password="p@ss1234", first_name="Alicia"),
            ADMIN,
        )
        self.assertEqual(self._stored(self.alice.id).first_name, "Alicia")

    def test_other_user_is_denied(self) -> None:
        with self.assertRaises(UserAccessDeniedError) as ctx:
            self.service.update_user(
                self.alice.id,
                UpdateUserRequest(username="alice", password="n3w-secret", first_name="Eve"),
                "bob",
            )
        self.assertEqual(ctx.exception.owner, "alice")
        self.assertEqual(ctx.exception.actor, "bob")
        self.assertNotIn("n3w-secret", ctx.exception.message)
        self.assertEqual(self._stored(self.alice.id).first_name, "Alice")

    def test_update_missing_user_raises_not_found(self) -> None:
        with self.assertRaises(UserNotFoundError):
            self.service.partial_update_user(999, PartialUpdateUserRequest(last_name="Doe"), ADMIN)

    def test_empty_patch_writes_nothing(self) -> None:
        before = self._stored(self.alice.id)
        snapshot = (before.username, before.password, before.first_name, before.last_name)
        with patch.object(self.session, "commit") as commit:
            result = self.service.partial_update_user(
                self.alice.id, PartialUpdateUserRequest(), "alice"
            )
        commit.assert_not_called()
        self.assertEqual(result.id, self.alice.id)
        after = self._stored(self.alice.id)
        self.assertEqual(
            (after.username, after.password, after.first_name, after.last_name), snapshot
        )

    def test_resubmitting_password_writes_nothing(self) -> None:
        with patch.object(self.session, "commit") as commit:
            self.service.partial_update_user(
                self.alice.id, PartialUpdateUserRequest(password="p@ss1234"), "alice"
            )
        commit.assert_not_called()

    def test_password_change_is_hashed(self) -> None:
        self.service.partial_update_user(
            self.alice.id, PartialUpdateUserRequest(password="n3w-secret"), "alice"
        )
        stored = self._stored(self.alice.id)
        self.assertNotEqual(stored.password, "n3w-secret")
        self.assertTrue(self.hasher.matches("n3w-secret", stored.password))

    def test_roles_replaced(self) -> None:
        self.service.partial_update_user(
            self.alice.id, PartialUpdateUserRequest(roles={RoleKind.ROLE_ADMIN}), ADMIN
        )
        self.assertEqual(self._stored(self.alice.id).role_names, ["ROLE_ADMIN"])
        # The no-longer-assigned role row is kept.
        self.assertEqual(self.session.query(Role).count(), 2)

    def test_rename_onto_taken_username_raises(self) -> None:
        self.service.create_user(CreateUserRequest(username="bob", password="b0b-secret"))
        with self.assertRaises(UserAlreadyExistsError):
            self.service.partial_update_user(
                self.alice.id, PartialUpdateUserRequest(username="bob"), "alice"
            )
        self.assertEqual(self._stored(self.alice.id).username, "alice")

    def test_unknown_role_name_raises(self) -> None:
        request = PartialUpdateUserRequest.model_construct(roles={"ROLE_ROOT"})
        with self.assertRaises(InvalidRoleKindError):
            self.service.partial_update_user(self.alice.id, request, "alice")

    def test_missing_actor_is_precondition_failure(self) -> None:
        with self.assertRaises(PreconditionFailedError):
            self.service.partial_update_user(
                self.alice.id, PartialUpdateUserRequest(last_name="Doe"), ""
            )


class TestDeleteUser(UserServiceTestCase):
    def test_delete_missing_user_raises_not_found(self) -> None:
        with self.assertRaises(UserNotFoundError):
            self.service.delete_user(999, ADMIN)

    def test_owner_may_delete(self) -> None:
        self.service.delete_user(self.alice.id, "alice")
        self.assertIsNone(self._stored(self.alice.id))
        # Roles are not removed with their users.
        self.assertEqual(self.session.query(Role).count(), 1)

    def test_admin_may_delete(self) -> None:
        self.service.delete_user(self.alice.id, ADMIN)
        self.assertEqual(self.session.query(User).count(), 0)

    def test_other_user_is_denied(self) -> None:
        with self.assertRaises(UserAccessDeniedError):
            self.service.delete_user(self.alice.id, "bob")
        self.assertIsNotNone(self._stored(self.alice.id))


if __name__ == "__main__":
    unittest.main()
