"""
Registration, login, profile updates and account deletion against in-memory ports.

Run with: python -m pytest tests/test_credential_manager.py -v
"""
from __future__ import annotations

import asyncio

import pytest

from app.domain.common.errors import (
    AccountNotFoundError,
    ConflictError,
    IncorrectCredentialError,
    NoChangesError,
    NotFoundError,
    PartialDeletionError,
    ValidationError,
)
from app.domain.tasks.models import TaskInput
from app.domain.users.models import LoginRequest, ProfilePatch, RegisterRequest, Role


def _register(credentials, name="Ann", email="ann@x.com", password="secret1"):
    return asyncio.run(credentials.register(RegisterRequest(name=name, email=email, password=password)))


def test_register_returns_member_and_token_for_that_member(credentials, tokens, user_repo):
    result = _register(credentials)

    assert result.user.name == "Ann"
    assert result.user.email == "ann@x.com"
    assert result.user.role is Role.MEMBER
    assert tokens.verify(result.token) == result.user.id
    stored = user_repo.rows[result.user.id]
    assert "secret1" not in stored.password_hash


def test_register_lowercases_and_trims_email(credentials):
    result = _register(credentials, email="  Ann@X.com ")
    assert result.user.email == "ann@x.com"


def test_register_collects_all_field_errors(credentials):
    with pytest.raises(ValidationError) as exc:
        _register(credentials, name="", email="nope", password="123")
    assert set(exc.value.errors) == {"name", "email", "password"}


@pytest.mark.parametrize(
    "email",
    ["plain", "a@b", "a b@x.com", "@x.com"],
)
def test_register_rejects_bad_email_shapes(credentials, email):
    with pytest.raises(ValidationError) as exc:
        _register(credentials, email=email)
    assert "email" in exc.value.errors


def test_register_accepts_long_name(credentials):
    result = _register(credentials, name="A" * 300)
    assert result.user.name == "A" * 300


def test_register_rejects_too_long_password(credentials):
    with pytest.raises(ValidationError) as exc:
        _register(credentials, password="x" * 73)
    assert "password" in exc.value.errors


def test_email_uniqueness_ignores_case(credentials):
    _register(credentials, email="A@x.com")
    with pytest.raises(ConflictError):
        _register(credentials, name="Other", email="a@X.COM")


def test_login_unknown_email_is_account_not_found(credentials):
    with pytest.raises(AccountNotFoundError) as exc:
        asyncio.run(credentials.login(LoginRequest(email="ghost@x.com", password="secret1")))
    assert exc.value.data == {"suggestion": "register"}


def test_login_wrong_password_is_incorrect_credential_and_no_lockout(credentials):
    _register(credentials)
    for _ in range(2):
        with pytest.raises(IncorrectCredentialError) as exc:
            asyncio.run(credentials.login(LoginRequest(email="ann@x.com", password="wrong!!")))
        assert exc.value.data == {"suggestion": "try_again"}

    result = asyncio.run(credentials.login(LoginRequest(email="ANN@x.com", password="secret1")))
    assert result.user.email == "ann@x.com"


def test_login_requires_both_fields(credentials):
    with pytest.raises(ValidationError):
        asyncio.run(credentials.login(LoginRequest(email="ann@x.com", password=None)))


def test_update_profile_with_nothing_is_no_changes(credentials):
    user = _register(credentials).user
    with pytest.raises(NoChangesError):
        asyncio.run(credentials.update_profile(user.id, ProfilePatch()))


def test_update_profile_name_only(credentials, clock):
    user = _register(credentials).user
    clock.advance(minutes=5)
    updated = asyncio.run(credentials.update_profile(user.id, ProfilePatch(name="  Annie ")))
    assert updated.name == "Annie"
    assert updated.email == user.email
    assert updated.updated_at > user.updated_at


def test_update_email_conflicts_with_other_user(credentials):
    ann = _register(credentials).user
    _register(credentials, name="Bob", email="bob@x.com")
    with pytest.raises(ConflictError):
        asyncio.run(credentials.update_profile(ann.id, ProfilePatch(email="BOB@x.com")))


def test_update_email_to_own_address_in_other_case_is_allowed(credentials):
    ann = _register(credentials).user
    updated = asyncio.run(credentials.update_profile(ann.id, ProfilePatch(email="ANN@X.COM")))
    assert updated.email == "ann@x.com"


def test_change_password_requires_correct_current_password(credentials):
    ann = _register(credentials).user
    with pytest.raises(IncorrectCredentialError):
        asyncio.run(
            credentials.update_profile(ann.id, ProfilePatch(current_password="nope00", new_password="newpass1"))
        )
    # old password still works
    asyncio.run(credentials.login(LoginRequest(email="ann@x.com", password="secret1")))


def test_change_password_requires_current_password_field(credentials):
    ann = _register(credentials).user
    with pytest.raises(ValidationError) as exc:
        asyncio.run(credentials.update_profile(ann.id, ProfilePatch(new_password="newpass1")))
    assert "currentPassword" in exc.value.errors


def test_change_password_rehashes_and_swaps_login(credentials, user_repo):
    ann = _register(credentials).user
    before = user_repo.rows[ann.id].password_hash

    asyncio.run(
        credentials.update_profile(ann.id, ProfilePatch(current_password="secret1", new_password="newpass1"))
    )

    assert user_repo.rows[ann.id].password_hash != before
    with pytest.raises(IncorrectCredentialError):
        asyncio.run(credentials.login(LoginRequest(email="ann@x.com", password="secret1")))
    asyncio.run(credentials.login(LoginRequest(email="ann@x.com", password="newpass1")))


def test_failed_profile_update_changes_nothing(credentials, user_repo):
    ann = _register(credentials).user
    with pytest.raises(ValidationError):
        asyncio.run(credentials.update_profile(ann.id, ProfilePatch(name="Annie", new_password="short")))
    assert user_repo.rows[ann.id].user.name == "Ann"


def test_profile_of_missing_account_is_not_found(credentials):
    with pytest.raises(NotFoundError):
        asyncio.run(credentials.get_profile("missing"))


def test_delete_account_removes_owned_tasks_only(credentials, task_manager, task_repo, user_repo):
    ann = _register(credentials).user
    bob = _register(credentials, name="Bob", email="bob@x.com").user

    async def run():
        for i in range(3):
            await task_manager.create(ann.id, TaskInput(title=f"Ann task {i}"))
        bob_task = await task_manager.create(bob.id, TaskInput(title="Bob task"))
        removed = await credentials.delete_account(ann.id)
        return removed, bob_task

    removed, bob_task = asyncio.run(run())

    assert removed == 3
    assert ann.id not in user_repo.rows
    assert [t.id for t in task_repo.rows.values()] == [bob_task.id]


def test_delete_account_aborts_when_task_cascade_fails(credentials, task_manager, task_repo, user_repo):
    ann = _register(credentials).user
    asyncio.run(task_manager.create(ann.id, TaskInput(title="Keep me")))
    task_repo.fail_delete_all = True

    with pytest.raises(RuntimeError):
        asyncio.run(credentials.delete_account(ann.id))

    assert ann.id in user_repo.rows
    assert len(task_repo.rows) == 1


def test_delete_account_reports_partial_failure(credentials, task_manager, task_repo, user_repo):
    ann = _register(credentials).user
    asyncio.run(task_manager.create(ann.id, TaskInput(title="Gone soon")))
    user_repo.fail_delete = True

    with pytest.raises(PartialDeletionError):
        asyncio.run(credentials.delete_account(ann.id))

    assert task_repo.rows == {}


def test_delete_missing_account_is_not_found(credentials):
    with pytest.raises(NotFoundError):
        asyncio.run(credentials.delete_account("missing"))
