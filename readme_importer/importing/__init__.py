"""README import package. Wiring lives in ``readme_importer.importing.importer``."""

from readme_importer.importing.domain.models import AssetMode, ImportRequest, ImportResult

__all__ = ["AssetMode", "ImportRequest", "ImportResult"]
