from __future__ import annotations

import logging

from app.domain.auth.tokens import TokenService
from app.domain.common.errors import (
    AccountNotFoundError,
    ConflictError,
    IncorrectCredentialError,
    NoChangesError,
    NotFoundError,
    PartialDeletionError,
    ValidationError,
)
from app.domain.common.ports import Clock, IdGenerator
from app.domain.common.time import to_iso
from app.domain.tasks.ports import TaskRepository
from app.domain.users.models import (
    AuthResult,
    LoginRequest,
    ProfilePatch,
    RegisterRequest,
    Role,
    User,
    UserRecord,
)
from app.domain.users.ports import PasswordHasher, UserRepository
from app.domain.users.rules import (
    normalize_email,
    validate_login,
    validate_profile_patch,
    validate_registration,
)

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
PARTIAL_DELETE = "Account tasks were deleted but the account could not be removed. Please retry."


class CredentialManager:
    """
    Registration, login and profile changes for a single account.

    Passwords only ever pass through the hasher; they are not stored or logged.
    """

    def __init__(
        self,
        users: UserRepository,
        tasks: TaskRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        clock: Clock,
        ids: IdGenerator,
    ) -> None:
        self._users = users
        self._tasks = tasks
        self._hasher = hasher
        self._tokens = tokens
        self._clock = clock
        self._ids = ids

    async def register(self, req: RegisterRequest) -> AuthResult:
        errors = validate_registration(req.name, req.email, req.password)
        if errors:
            raise ValidationError("Validation failed", errors)

        email = normalize_email(req.email)
        if await self._users.get_by_email(email) is not None:
            raise ConflictError("User already exists")

        password_hash = await self._hasher.hash(req.password)
        record = await self._users.create(
            user_id=self._ids.new_id(),
            name=req.name.strip(),
            email=email,
            password_hash=password_hash,
            role=Role.MEMBER.value,
            now_iso=to_iso(self._clock.now()),
        )
        logger.info("User registered id=%s", record.user.id)
        return AuthResult(user=record.user, token=self._tokens.issue(record.user.id))

    async def login(self, req: LoginRequest) -> AuthResult:
        errors = validate_login(req.email, req.password)
        if errors:
            raise ValidationError("Please provide email and password", errors)

        record = await self._users.get_by_email(normalize_email(req.email))
        if record is None:
            logger.info("Login for unknown email")
            raise AccountNotFoundError()

        if not await self._hasher.verify(req.password, record.password_hash):
            logger.info("Login with wrong password id=%s", record.user.id)
            raise IncorrectCredentialError()

        logger.info("User logged in id=%s", record.user.id)
        return AuthResult(user=record.user, token=self._tokens.issue(record.user.id))

    async def get_profile(self, owner_id: str) -> User:
        return (await self._require(owner_id)).user

    async def update_profile(self, owner_id: str, patch: ProfilePatch) -> User:
        if patch.is_empty():
            raise NoChangesError()

        errors = validate_profile_patch(patch.name, patch.email, patch.current_password, patch.new_password)
        if errors:
            raise ValidationError("Validation failed", errors)

        record = await self._require(owner_id)
        current = record.user

        name = patch.name.strip() if patch.name else current.name

        email = current.email
        if patch.email:
            email = normalize_email(patch.email)
            if email != current.email and await self._users.email_taken_by_other(email, owner_id):
                raise ConflictError("Email already in use")

        password_hash = record.password_hash
        if patch.new_password:
            if not await self._hasher.verify(patch.current_password, record.password_hash):
                raise IncorrectCredentialError("Current password is incorrect")
            password_hash = await self._hasher.hash(patch.new_password)

        updated = await self._users.update(
            user_id=owner_id,
            name=name,
            email=email,
            password_hash=password_hash,
            now_iso=to_iso(self._clock.now()),
        )
        if updated is None:
            raise NotFoundError(USER_NOT_FOUND)
        logger.info("Profile updated id=%s", owner_id)
        return updated.user

    async def delete_account(self, owner_id: str) -> int:
        """
        Delete the owner's tasks, then the owner.

        Returns the number of tasks removed. If task removal fails nothing else
        is touched; if the user row cannot be removed afterwards the caller gets
        PartialDeletionError.
        """
        await self._require(owner_id)

        removed = await self._tasks.delete_all_for_owner(owner_id)

        try:
            deleted = await self._users.delete(owner_id)
        except Exception as e:
            logger.error("Account deletion incomplete id=%s tasks_removed=%s", owner_id, removed, exc_info=True)
            raise PartialDeletionError(PARTIAL_DELETE) from e
        if not deleted:
            # removed concurrently; nothing is left behind either way
            raise NotFoundError(USER_NOT_FOUND)

        logger.info("Account deleted id=%s tasks_removed=%s", owner_id, removed)
        return removed

    async def _require(self, owner_id: str) -> UserRecord:
        record = await self._users.get_by_id(owner_id)
        if record is None:
            raise NotFoundError(USER_NOT_FOUND)
        return record
