"""The ``ConfigStore`` capability: where the current kernel path is recorded."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConfigStore(Protocol):
    """Protocol for the persisted "current kernel path" setting."""

    def get_kernel_path(self) -> str:
        """Return the configured kernel path, or ``""`` when unset."""
        ...

    def set_kernel_path(self, path: str) -> None:
        """Record *path*, creating the backing store if absent.

        Unrelated settings are left untouched.
        """
        ...
