import inspect
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

T = TypeVar("T")

# Guard: проверяет и нормализует черновик сущности, при ошибке бросает AppError
Guard = Callable[[T], Union[None, Awaitable[None]]]


async def run_guards(entity: T, *guards: Guard) -> T:
    """Последовательный запуск guard-функций; первая ошибка прерывает цепочку"""
    for guard in guards:
        result: Optional[Any] = guard(entity)
        if inspect.isawaitable(result):
            await result
    return entity
