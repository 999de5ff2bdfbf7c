from contextlib import contextmanager
from pathlib import Path
import shutil
import tempfile
import uuid


@contextmanager
def managed_temp_dir(prefix: str, root: str | None = None):
    base_tmp = Path(root) if root else Path(tempfile.gettempdir()) / "readme_importer_tests"
    base_tmp.mkdir(parents=True, exist_ok=True)
    tmp_path = base_tmp / f"{prefix}_{uuid.uuid4().hex}"
    tmp_path.mkdir(parents=True)
    try:
        yield tmp_path
    finally:
        shutil.rmtree(tmp_path, ignore_errors=True)
