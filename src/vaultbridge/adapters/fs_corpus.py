from pathlib import Path
from typing import Iterable

from ..core.model import CorpusFile
from ..core.ports import CorpusStore


class FsCorpus(CorpusStore):
    """Vault on the local filesystem. Dot-folders (.obsidian, .git, ...) are not documents."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, path: str) -> Path:
        return self.root / path

    def _hidden(self, rel: Path) -> bool:
        return any(part.startswith(".") for part in rel.parts[:-1])

    def list_files(self) -> Iterable[CorpusFile]:
        if not self.root.exists():
            return []
        found = []
        for p in self.root.rglob("*.md"):
            rel = p.relative_to(self.root)
            if not p.is_file() or self._hidden(rel):
                continue
            found.append(CorpusFile.from_path(rel.as_posix()))
        return sorted(found, key=lambda f: f.path)

    def list_folders(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        folders = []
        for p in self.root.rglob("*"):
            rel = p.relative_to(self.root)
            if p.is_dir() and not any(part.startswith(".") for part in rel.parts):
                folders.append(rel.as_posix())
        return sorted(folders)

    def exists(self, path: str) -> bool:
        return self._path(path).exists()

    def read(self, path: str) -> str:
        return self._path(path).read_text(encoding="utf-8")

    def write(self, path: str, contents: str) -> None:
        p = self._path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        # atomic via temp file
        tmp = p.with_name(p.name + ".tmp")
        tmp.write_text(contents, encoding="utf-8")
        tmp.replace(p)

    def create(self, path: str, contents: str = "") -> None:
        p = self._path(path)
        if p.exists():
            raise FileExistsError(f"Already exists: {path}")
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(contents, encoding="utf-8")

    def rename(self, path: str, new_path: str) -> None:
        src = self._path(path)
        dst = self._path(new_path)
        if dst.exists():
            raise FileExistsError(f"Destination already exists: {new_path}")
        dst.parent.mkdir(parents=True, exist_ok=True)
        src.rename(dst)

    def mkdir(self, path: str) -> None:
        self._path(path).mkdir(parents=True, exist_ok=True)
