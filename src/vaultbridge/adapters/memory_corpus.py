from typing import Iterable

from ..core.errors import ReadOnlyStoreError
from ..core.model import CorpusFile
from ..core.ports import CorpusStore


class MemoryCorpus(CorpusStore):
    """
    Vault held in a dict of path -> text. Insertion order is the corpus order.
    With read_only=True every mutation raises ReadOnlyStoreError.
    """

    def __init__(self, files: dict[str, str] | None = None, read_only: bool = False):
        self.files: dict[str, str] = dict(files or {})
        self.folders: set[str] = set()
        self.read_only = read_only

    def _guard(self, path: str) -> None:
        if self.read_only:
            raise ReadOnlyStoreError(f"Refusing to write {path}: vault is read-only")

    def _hidden(self, path: str) -> bool:
        return any(part.startswith(".") for part in path.split("/")[:-1])

    def list_files(self) -> Iterable[CorpusFile]:
        return [
            CorpusFile.from_path(p)
            for p in self.files
            if p.endswith(".md") and not self._hidden(p)
        ]

    def list_folders(self) -> Iterable[str]:
        out = set(self.folders)
        for p in self.files:
            parts = p.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                out.add("/".join(parts[:i]))
        return sorted(out)

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.list_folders()

    def read(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def write(self, path: str, contents: str) -> None:
        self._guard(path)
        self.files[path] = contents

    def create(self, path: str, contents: str = "") -> None:
        self._guard(path)
        if path in self.files:
            raise FileExistsError(f"Already exists: {path}")
        self.files[path] = contents

    def rename(self, path: str, new_path: str) -> None:
        self._guard(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        if new_path in self.files:
            raise FileExistsError(f"Destination already exists: {new_path}")
        self.files[new_path] = self.files.pop(path)

    def mkdir(self, path: str) -> None:
        self._guard(path)
        self.folders.add(path)
