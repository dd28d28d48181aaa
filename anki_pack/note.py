"""
Notes: the content of one flashcard, independent of how it is stored.
"""

from anki_pack.config import NoteConfig
from anki_pack.utils import checksum, format_tags, generate_unique_guid, join_fields


class Note:
    """
    One note's field values and tags.

    The ``guid`` is fixed at construction. Storage ids (``notes.id``) are
    assigned later by the database writer and never live on the note.

    :param config: Note configuration record. ``guid`` may be an int or a
        decimal string; a time-seeded GUID is generated when omitted.
    """

    def __init__(self, config: NoteConfig) -> None:
        self.model_id = config.model_id
        self.fields = list(config.fields)
        self.tags: list[str] = list(dict.fromkeys(config.tags))
        self._guid = int(config.guid) if config.guid is not None else generate_unique_guid()
        self.sort_field_index = config.sort_field_index

    @property
    def guid(self) -> int:
        return self._guid

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.fields):
            raise IndexError(f"Field index {index} is out of range")

    def set_field(self, index: int, value: str) -> None:
        """
        Set a field value.

        :raises IndexError: If ``index`` is outside ``[0, len(fields))``.
        """
        self._check_index(index)
        self.fields[index] = value

    def get_field(self, index: int) -> str:
        """
        Get a field value.

        :raises IndexError: If ``index`` is outside ``[0, len(fields))``.
        """
        self._check_index(index)
        return self.fields[index]

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        if tag in self.tags:
            self.tags.remove(tag)

    def checksum(self) -> int:
        return checksum(self.fields)

    @property
    def joined_fields(self) -> str:
        return join_fields(self.fields)

    @property
    def sort_field(self) -> str:
        # Anki's sfld column holds the first field verbatim
        return self.fields[0] if self.fields else ""

    @property
    def formatted_tags(self) -> str:
        return format_tags(self.tags)

    def __repr__(self) -> str:
        return f"Note(guid={self.guid}, model_id={self.model_id}, fields={self.fields!r})"
