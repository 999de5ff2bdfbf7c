class ReadmeImportError(Exception):
    """Base class for every failure raised inside the import pipeline."""


class FetchError(ReadmeImportError):
    def __init__(self, url: str, status: int | None = None, message: str | None = None) -> None:
        self.url = url
        self.status = status
        detail = message or (f"HTTP {status}" if status is not None else "transport failure")
        super().__init__(f"Failed to fetch {url}: {detail}")


class MalformedReferenceError(FetchError):
    """The repository URL did not decompose into an owner/name pair."""


class ResolutionError(ReadmeImportError):
    def __init__(self, url: str, base_url: str, reason: str) -> None:
        self.url = url
        self.base_url = base_url
        super().__init__(f"Cannot resolve {url!r} against {base_url!r}: {reason}")


class StorageError(ReadmeImportError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot store asset at {path}: {reason}")
