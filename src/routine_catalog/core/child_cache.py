import asyncio
import inspect
import logging
import threading
from typing import Any, Callable, Tuple, Union

from routine_catalog.core.errors import FetchError

logger = logging.getLogger(__name__)


class ChildCache:
    """
    Memoize-once holder for the children of a single catalog object.

    States are Empty (`_children is None`) and Populated. A successful fetch
    moves Empty -> Populated, `clear()` moves back to Empty, a failed fetch
    leaves the cache Empty so the next call retries.

    First access is serialized: a `threading.Lock` guards `get_children` and an
    `asyncio.Lock` guards `aget_children`, so concurrent first callers on the
    same path trigger a single fetch and share its result. `clear()` takes no
    lock; a fetch that was in flight when it ran returns its result to its
    caller but does not store it.

    A `fetch_fn` that asks the same cache for its children from inside the
    fetch gets a `FetchError` instead of waiting on itself. Copies of a cache
    start Empty with their own locks.
    """

    def __init__(self) -> None:
        self._children: Union[Tuple[Any, ...], None] = None
        self._generation = 0
        self._lock = threading.Lock()
        self._fetching_thread: Union[int, None] = None
        self._fetching_task: Union[asyncio.Task, None] = None
        self._async_lock: Union[asyncio.Lock, None] = None
        self._async_lock_loop: Union[asyncio.AbstractEventLoop, None] = None

    def __copy__(self) -> "ChildCache":
        return ChildCache()

    def __deepcopy__(self, memo) -> "ChildCache":
        return ChildCache()

    @property
    def is_populated(self) -> bool:
        return self._children is not None

    def get_children(self, owner: Any, fetch_fn: Callable[[Any], Any]) -> Tuple[Any, ...]:
        """
        Return the cached children of `owner`, calling `fetch_fn(owner)` on first use.

        Raises:
            FetchError: If `fetch_fn` fails. Nothing is cached in that case.
        """
        children = self._children
        if children is not None:
            return children

        if self._fetching_thread == threading.get_ident():
            raise FetchError(_describe(owner), "children requested again while being fetched")

        with self._lock:
            if self._children is not None:
                return self._children

            generation = self._generation
            self._fetching_thread = threading.get_ident()
            try:
                children = tuple(fetch_fn(owner))
            except FetchError:
                raise
            except Exception as e:
                raise self._fetch_failed(owner, e) from e
            finally:
                self._fetching_thread = None

            return self._store(owner, children, generation)

    async def aget_children(self, owner: Any, fetch_fn: Callable[[Any], Any]) -> Tuple[Any, ...]:
        """Same contract as `get_children`; `fetch_fn` may return an awaitable."""
        children = self._children
        if children is not None:
            return children

        if self._fetching_task is not None and self._fetching_task is asyncio.current_task():
            raise FetchError(_describe(owner), "children requested again while being fetched")

        async with self._loop_lock():
            if self._children is not None:
                return self._children

            generation = self._generation
            self._fetching_task = asyncio.current_task()
            try:
                result = fetch_fn(owner)
                if inspect.isawaitable(result):
                    result = await result
                children = tuple(result)
            except FetchError:
                raise
            except Exception as e:
                raise self._fetch_failed(owner, e) from e
            finally:
                self._fetching_task = None

            return self._store(owner, children, generation)

    def _loop_lock(self) -> asyncio.Lock:
        """Return the asyncio lock of the running loop; locks cannot cross loops."""
        loop = asyncio.get_running_loop()
        if self._async_lock is None or self._async_lock_loop is not loop:
            self._async_lock = asyncio.Lock()
            self._async_lock_loop = loop
        return self._async_lock

    def clear(self) -> None:
        """Unconditionally drop cached children."""
        self._generation += 1
        self._children = None

    def _store(self, owner: Any, children: Tuple[Any, ...], generation: int) -> Tuple[Any, ...]:
        if generation != self._generation:
            logger.debug(f"Cache of {_describe(owner)} cleared during fetch; result not stored")
            return children

        self._children = children
        logger.debug(f"Cached {len(children)} children of {_describe(owner)}")
        return children

    @staticmethod
    def _fetch_failed(owner: Any, error: Exception) -> FetchError:
        name = _describe(owner)
        logger.warning(f"⚠️ Fetching children of {name} failed: {error}")
        return FetchError(name, str(error))


def _describe(owner: Any) -> str:
    return getattr(owner, "fully_qualified_name", None) or repr(owner)
