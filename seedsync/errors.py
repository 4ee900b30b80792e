"""Error types raised by the seed sync pipeline."""

from __future__ import annotations

from typing import Iterable


class SeedSyncError(Exception):
    pass


class ResourceNotFound(SeedSyncError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Seed resource not found: {name}")
        self.name = name


class DecodeFailure(SeedSyncError):
    def __init__(self, name: str, underlying: BaseException | None = None) -> None:
        detail = f": {underlying}" if underlying is not None else ""
        super().__init__(f"Failed to decode {name}{detail}")
        self.name = name
        self.underlying = underlying


class DuplicateSeedId(DecodeFailure):
    def __init__(self, name: str, ids: Iterable[str]) -> None:
        self.ids = sorted(set(ids))
        super().__init__(name, ValueError(f"duplicate ids: {', '.join(self.ids)}"))


class StoreNotConfigured(SeedSyncError):
    def __init__(self, message: str = "Remote document store is not configured") -> None:
        super().__init__(message)


class RemoteStoreError(SeedSyncError):
    """Error reported by the remote document store."""

    def __init__(self, status: str | None, message: str, *, code: int | None = None) -> None:
        super().__init__(f"{status or 'ERROR'}: {message}")
        self.status = status
        self.message = message
        self.code = code


class TransientRemoteFailure(RemoteStoreError):
    pass


class PermanentRemoteFailure(RemoteStoreError):
    pass
