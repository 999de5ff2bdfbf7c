from pathlib import Path, PurePosixPath

from readme_importer.importing.domain.errors import StorageError


class VaultAssetStore:
    def __init__(self, vault_dir: str | Path, assets_dir: str = "assets") -> None:
        self.vault_dir = Path(vault_dir)
        self.assets_dir = assets_dir

    @property
    def container(self) -> Path:
        return self.vault_dir / self.assets_dir

    def ensure_container(self) -> Path:
        try:
            self.container.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(str(self.container), str(exc)) from exc
        return self.container

    def write(self, filename: str, data: bytes) -> str:
        file_path = self.container / filename
        try:
            file_path.write_bytes(data)
        except OSError as exc:
            raise StorageError(str(file_path), str(exc)) from exc
        return str(PurePosixPath(self.assets_dir) / filename)
