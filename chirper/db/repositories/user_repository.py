from sqlalchemy import select, update

from chirper.core.errors import NotFound
from chirper.db.base import utcnow
from chirper.db.models.user import User as UserModel
from chirper.db.repositories.base import BaseRepository
from chirper.domains.identity.entities import User

USER_NOT_FOUND = "The user does not exist."


def user_to_domain(db_user: UserModel) -> User:
    """Преобразование модели БД в доменную сущность"""
    return User(
        id=db_user.id,
        email=db_user.email,
        name=db_user.name,
        handle=db_user.handle,
        bio=db_user.bio,
        avatar=db_user.avatar,
        header=db_user.header,
        password_hash=db_user.password_hash,
        remember_hash=db_user.remember_hash,
        created_at=db_user.created_at,
        updated_at=db_user.updated_at,
        deleted_at=db_user.deleted_at
    )


class UserRepository(BaseRepository):
    """Репозиторий для работы с пользователями"""

    conflict_message = "This email address is already taken."

    async def create(self, user: User, commit: bool = True) -> User:
        """Создание нового пользователя; id и даты записываются в переданную сущность"""
        db_user = UserModel(
            email=user.email,
            name=user.name,
            handle=user.handle,
            bio=user.bio,
            avatar=user.avatar,
            header=user.header,
            password_hash=user.password_hash,
            remember_hash=user.remember_hash
        )

        self.session.add(db_user)
        if commit:
            await self._commit()
        else:
            await self._flush()

        user.id = db_user.id
        user.created_at = db_user.created_at
        user.updated_at = db_user.updated_at
        return user

    async def get_by_id(self, user_id: int) -> User:
        """Получение активного пользователя по id"""
        return await self._get_one(
            select(UserModel).where(UserModel.id == user_id, UserModel.deleted_at.is_(None))
        )

    async def get_by_email(self, email: str, include_deleted: bool = False) -> User:
        """Получение пользователя по email"""
        stmt = select(UserModel).where(UserModel.email == email)
        if not include_deleted:
            stmt = stmt.where(UserModel.deleted_at.is_(None))
        return await self._get_one(stmt)

    async def get_by_remember_hash(self, remember_hash: str) -> User:
        """Получение пользователя по HMAC remember-токена"""
        return await self._get_one(
            select(UserModel).where(
                UserModel.remember_hash == remember_hash,
                UserModel.deleted_at.is_(None)
            )
        )

    async def update(self, user: User) -> User:
        """Обновление пользователя"""
        user.updated_at = utcnow()
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(
                email=user.email,
                name=user.name,
                handle=user.handle,
                bio=user.bio,
                avatar=user.avatar,
                header=user.header,
                password_hash=user.password_hash,
                remember_hash=user.remember_hash,
                updated_at=user.updated_at
            )
        )

        result = await self._execute(stmt)
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFound(USER_NOT_FOUND)
        await self._commit()
        return user

    async def soft_delete(self, user: User) -> User:
        """Мягкое удаление: строка остается, но пользователь больше не находится"""
        user.deleted_at = utcnow()
        await self._execute(
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(deleted_at=user.deleted_at, remember_hash=user.remember_hash)
        )
        await self._commit()
        return user

    async def _get_one(self, stmt) -> User:
        result = await self._execute(stmt)
        db_user = result.scalar_one_or_none()
        if db_user is None:
            raise NotFound(USER_NOT_FOUND)
        return user_to_domain(db_user)
