"""Config stores: the ``ConfigStore`` Protocol and the ``.wslconfig`` backend."""

from kernsync.stores.base import ConfigStore
from kernsync.stores.wslconfig import WslConfigStore

__all__ = ["ConfigStore", "WslConfigStore"]
