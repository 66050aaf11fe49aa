"""SQLAlchemy implementation of IUserRepository.

Users are soft-deleted: ``delete`` stamps ``deleted_at`` and every read
filters such rows out.
"""

from __future__ import annotations

import uuid
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from account.domain import User
from account.infrastructure.models import UserModel
from account.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from account.ports.repositories import IUserRepository
from infrastructure.database import transaction, translate_store_errors, utc_now
from shared_kernel.exceptions import NotFoundError
from shared_kernel.identifiers import is_nil


class UserRepository(IUserRepository):
    """Repository for User aggregates backed by the users table."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def create(self, user: User) -> User:
        """Persist a new user, assigning an id when it is nil."""
        if is_nil(user.id):
            user.id = uuid.uuid4()

        with translate_store_errors("create user"):
            async with transaction(self._session):
                model = UserModel(
                    id=user.id,
                    email=user.email,
                    full_name=user.full_name,
                    image_url=user.image_url,
                    bio=user.bio,
                    url=user.url,
                    context_information=dict(user.context_information),
                )
                self._session.add(model)
                await self._session.flush()
                created = self._to_domain(model)

        self._probe.user_created(str(created.id))
        return created

    async def save(self, user: User) -> User:
        """Write the mutable fields of an existing user."""
        with translate_store_errors("save user"):
            async with transaction(self._session):
                model = await self._get_live_model(user.id)
                model.email = user.email
                model.full_name = user.full_name
                model.image_url = user.image_url
                model.bio = user.bio
                model.url = user.url
                model.context_information = dict(user.context_information)
                await self._session.flush()
                saved = self._to_domain(model)

        self._probe.user_saved(str(saved.id))
        return saved

    async def load(self, user_id: UUID) -> User:
        """Retrieve a live user by id."""
        with translate_store_errors("load user"):
            async with transaction(self._session):
                model = await self._get_live_model(user_id)
                user = self._to_domain(model)

        self._probe.user_retrieved(str(user_id))
        return user

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a live user by email, or None."""
        stmt = select(UserModel).where(
            UserModel.email == email, UserModel.deleted_at.is_(None)
        )
        with translate_store_errors("load user by email"):
            async with transaction(self._session):
                result = await self._session.execute(stmt)
                model = result.scalar_one_or_none()
                return None if model is None else self._to_domain(model)

    async def list(self) -> list[User]:
        """List live users ordered by creation time."""
        stmt = (
            select(UserModel)
            .where(UserModel.deleted_at.is_(None))
            .order_by(UserModel.created_at, UserModel.id)
        )
        with translate_store_errors("list users"):
            async with transaction(self._session):
                result = await self._session.execute(stmt)
                return [self._to_domain(model) for model in result.scalars().all()]

    async def delete(self, user_id: UUID) -> None:
        """Soft-delete a user."""
        with translate_store_errors("delete user"):
            async with transaction(self._session):
                model = await self._get_live_model(user_id)
                model.deleted_at = utc_now()
                await self._session.flush()

        self._probe.user_deleted(str(user_id))

    async def _get_live_model(self, user_id: UUID) -> UserModel:
        stmt = select(UserModel).where(
            UserModel.id == user_id, UserModel.deleted_at.is_(None)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            self._probe.user_not_found(str(user_id))
            raise NotFoundError("user", user_id)
        return model

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            image_url=model.image_url,
            bio=model.bio,
            url=model.url,
            context_information=dict(model.context_information or {}),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
