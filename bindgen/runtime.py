"""Python rendition of the lifecycle protocol the generated wrappers implement.

Each generated class keeps an identity cache (one wrapper per live native
handle) and an interlocked disposed counter that gates the release step so
that concurrent or repeated disposal releases the native object exactly once.
This module mirrors that protocol so it can be exercised from Python against
a stand-in for the native imports.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Generic, TypeVar

logger = logging.getLogger(__name__)

NULL_HANDLE = 0

T = TypeVar("T")


class InterlockedCounter:
    """Atomic increment-and-read, the gate used by ``Dispose``."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        return self._value


class IdentityCache(Generic[T]):
    """Concurrent handle → wrapper mapping."""

    def __init__(self):
        self._items: dict[int, T] = {}
        self._lock = threading.Lock()

    def get(self, handle: int) -> T | None:
        with self._lock:
            return self._items.get(handle)

    def get_or_add(self, handle: int, factory: Callable[[], T]) -> T:
        with self._lock:
            existing = self._items.get(handle)
            if existing is not None:
                return existing
            item = factory()
            self._items[handle] = item
            return item

    def try_remove(self, handle: int) -> bool:
        with self._lock:
            return self._items.pop(handle, None) is not None

    def __contains__(self, handle: int) -> bool:
        with self._lock:
            return handle in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class NativeApi(ABC):
    """The native imports a wrapper calls during its lifetime."""

    @abstractmethod
    def add_ref(self, handle: int) -> None: ...

    @abstractmethod
    def release_ref(self, handle: int) -> None: ...

    @abstractmethod
    def destroy(self, handle: int) -> None: ...


class NativeObject:
    """Base wrapper. Every subclass gets its own identity cache.

    Subclasses set ``ref_counted`` to choose between releasing a reference
    and destroying the native object on disposal.
    """

    ref_counted: ClassVar[bool] = False
    cache: ClassVar[IdentityCache]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.cache = IdentityCache()

    def __init__(self, handle: int, native: NativeApi):
        self._disposed = InterlockedCounter()
        self._native = native
        self.handle = NULL_HANDLE
        # Null while a subclass constructor is still creating the native object
        if handle != NULL_HANDLE:
            self.handle = handle
            if self.ref_counted:
                native.add_ref(handle)

    @classmethod
    def wrap(cls, handle: int, native: NativeApi):
        """The single wrapper for *handle*, created on first sight."""
        if handle == NULL_HANDLE:
            return None
        return cls.cache.get_or_add(handle, lambda: cls(handle, native))

    @property
    def disposed(self) -> bool:
        return self._disposed.value > 0

    def dispose(self) -> None:
        if self._disposed.increment() != 1:
            return
        handle = self.handle
        type(self).cache.try_remove(handle)
        if handle != NULL_HANDLE:
            if self.ref_counted:
                self._native.release_ref(handle)
            else:
                self._native.destroy(handle)
        self.handle = NULL_HANDLE
        logger.debug("Disposed %s handle %#x", type(self).__name__, handle)

    def __del__(self):
        if "_disposed" in self.__dict__:
            self.dispose()


NativeObject.cache = IdentityCache()
