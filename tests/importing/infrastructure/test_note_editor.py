import unittest

from readme_importer.importing.infrastructure.note_editor import NoteEditor
from tests.utils.tempdir import managed_temp_dir


class NoteEditorTests(unittest.TestCase):
    def test_missing_note_is_created(self):
        with managed_temp_dir("note_create") as tmp:
            note = tmp / "notes" / "widgets.md"
            NoteEditor(note).replace_selection("# Widgets\n")
            self.assertEqual(note.read_text(encoding="utf-8"), "# Widgets\n")

    def test_marker_is_replaced_once(self):
        with managed_temp_dir("note_marker") as tmp:
            note = tmp / "note.md"
            note.write_text("before\n{{selection}}\nafter {{selection}}\n", encoding="utf-8")

            NoteEditor(note).replace_selection("README")

            self.assertEqual(note.read_text(encoding="utf-8"), "before\nREADME\nafter {{selection}}\n")

    def test_without_marker_text_is_appended_on_a_new_line(self):
        with managed_temp_dir("note_append") as tmp:
            note = tmp / "note.md"
            note.write_text("existing", encoding="utf-8")

            NoteEditor(note).replace_selection("README")

            self.assertEqual(note.read_text(encoding="utf-8"), "existing\nREADME")
