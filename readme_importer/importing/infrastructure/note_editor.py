from pathlib import Path

from readme_importer.config.logger_config import logger

SELECTION_MARKER = "{{selection}}"


class NoteEditor:
    """Insertion target backed by a Markdown note on disk.

    The first ``{{selection}}`` marker in the note stands for the current
    selection and is replaced; without a marker the cursor is the end of
    the note. The note is rewritten with a single write.
    """

    def __init__(self, note_path: str | Path, marker: str = SELECTION_MARKER) -> None:
        self.note_path = Path(note_path)
        self.marker = marker

    def read(self) -> str:
        if not self.note_path.exists():
            return ""
        return self.note_path.read_text(encoding="utf-8")

    def replace_selection(self, text: str) -> None:
        current = self.read()
        if self.marker in current:
            updated = current.replace(self.marker, text, 1)
        elif current and not current.endswith("\n"):
            updated = f"{current}\n{text}"
        else:
            updated = current + text
        self.note_path.parent.mkdir(parents=True, exist_ok=True)
        self.note_path.write_text(updated, encoding="utf-8")
        logger.info("Inserted {} chars into {}", len(text), str(self.note_path))
