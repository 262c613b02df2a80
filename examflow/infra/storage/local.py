from __future__ import annotations

from pathlib import Path

from examflow.infra.ports.storage import StoragePort


class LocalFileStorage(StoragePort):
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        root = self.base_dir.resolve()
        dest = (root / key).resolve()
        if root != dest and root not in dest.parents:
            raise ValueError(f"Storage key escapes the upload directory: {key!r}")
        return dest

    def read_bytes(self, key: str) -> bytes:
        return self._path_for(key).read_bytes()

    def save_bytes(self, key: str, data: bytes, content_type: str | None) -> str:
        dest = self._path_for(key)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        return key
