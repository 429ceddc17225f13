import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chirper.core.errors import Internal, InvalidInput

logger = logging.getLogger(__name__)


class BaseRepository:
    """Общая обертка над AsyncSession: ошибки SQLAlchemy превращаются в ошибки приложения"""

    # Сообщение для нарушения уникальности, если вызывающий не передал свое
    conflict_message = "This record already exists."

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _execute(self, stmt, conflict_message: str = "") -> Any:
        try:
            return await self.session.execute(stmt)
        except IntegrityError as e:
            await self._conflict(e, conflict_message)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise Internal(f"{type(self).__name__}: query failed: {e}") from e

    async def _commit(self, conflict_message: str = "") -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self._conflict(e, conflict_message)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise Internal(f"{type(self).__name__}: commit failed: {e}") from e

    async def _conflict(self, e: IntegrityError, conflict_message: str) -> None:
        await self.session.rollback()
        logger.info(f"{type(self).__name__}: constraint violation: {e.orig}")
        raise InvalidInput(conflict_message or self.conflict_message) from e

    async def _flush(self, conflict_message: str = "") -> None:
        """Запись без коммита: изменения станут видны только после общего _commit"""
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self._conflict(e, conflict_message)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise Internal(f"{type(self).__name__}: flush failed: {e}") from e
