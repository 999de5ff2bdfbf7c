import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

log_dir = Path(os.getenv("README_IMPORTER_LOG_DIR", "logs"))
log_file = log_dir / "readme_importer_{time}.log"

logger.remove()
logger.add(
    log_file,
    rotation="256 MB",
    retention="10 days",
    compression="zip",
    encoding="utf-8",
    level=os.getenv("README_IMPORTER_LOG_LEVEL", "DEBUG").upper(),
    enqueue=True,
)
