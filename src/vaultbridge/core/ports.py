from typing import Any, Iterable, Protocol

from .model import CorpusFile


class CorpusStore(Protocol):
    """
    File storage of the vault. Paths are vault-relative and "/" separated.
    """

    def list_files(self) -> Iterable[CorpusFile]:
        """All Markdown documents, in a stable iteration order."""
        pass

    def list_folders(self) -> Iterable[str]:
        pass

    def exists(self, path: str) -> bool:
        pass

    def read(self, path: str) -> str:
        pass

    def write(self, path: str, contents: str) -> None:
        pass

    def create(self, path: str, contents: str = "") -> None:
        pass

    def rename(self, path: str, new_path: str) -> None:
        """Move a file, creating intermediate folders as needed."""
        pass

    def mkdir(self, path: str) -> None:
        pass


class LiveSettingsSource(Protocol):
    """
    Settings as currently loaded by the running host application.
    Optional; callers fall back to the serialized JSON files.
    """

    def get(self, target: str, key: str) -> Any:
        pass
