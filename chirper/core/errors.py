import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Something went wrong. Please try again."


class AppError(Exception):
    """Базовая ошибка приложения с сообщением для пользователя"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = INTERNAL_MESSAGE):
        self.message = message
        super().__init__(message)

    @property
    def public_message(self) -> str:
        return self.message


class InvalidInput(AppError):
    """Данные не прошли валидацию"""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidCredentials(InvalidInput):
    """Неверный email, пароль или способ входа"""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(AppError):
    """Запрошенная сущность не существует"""

    status_code = status.HTTP_404_NOT_FOUND


class Unauthorized(AppError):
    """Пользователь аутентифицирован, но действие ему не разрешено"""

    status_code = status.HTTP_403_FORBIDDEN


class Internal(AppError):
    """Внутренняя ошибка; подробности только в логах"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def public_message(self) -> str:
        return INTERNAL_MESSAGE


class HashingError(Internal):
    pass


class EntropySourceError(Internal):
    pass


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, Internal):
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.message}", exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.public_message})


def register_exception_handlers(app: FastAPI) -> None:
    """Регистрация обработчиков ошибок таксономии"""
    app.add_exception_handler(AppError, app_error_handler)
