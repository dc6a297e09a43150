"""
Single catalog entry: a msgid, its optional plural id and translated forms.
"""

from __future__ import annotations

from typing import Any


class Translation:
    """
    One message of a catalog.

    ``forms`` maps a plural-form index to translated text. It may be empty
    or sparse; the getters fall back to the untranslated ids.
    """

    __slots__ = ("id", "plural_id", "forms", "dirty")

    def __init__(self, id: str = "", plural_id: str = "", forms: dict[int, str] | None = None):
        self.id = id
        self.plural_id = plural_id
        self.forms: dict[int, str] = dict(forms) if forms else {}
        # Set by catalog-editing operations, see Domain.drop_stale_translations
        self.dirty = False

    def get(self) -> str:
        """Return the singular translation, or the msgid if untranslated."""
        text = self.forms.get(0)
        if text:
            return text
        return self.id

    def get_n(self, index: int) -> str:
        """
        Return the translation for a plural-form index.

        Falls back to the msgid for index 0 and to the plural id otherwise.
        Entries without a plural id fall back to the msgid.
        """
        text = self.forms.get(index)
        if text:
            return text
        if index == 0:
            return self.id
        return self.plural_id or self.id

    def is_translated(self) -> bool:
        return bool(self.forms.get(0))

    def is_translated_n(self, index: int) -> bool:
        return bool(self.forms.get(index))

    def set(self, text: str) -> None:
        self.set_n(0, text)

    def set_n(self, index: int, text: str) -> None:
        self.forms[index] = text
        self.dirty = True

    def copy(self) -> Translation:
        clone = Translation(self.id, self.plural_id, self.forms)
        clone.dirty = self.dirty
        return clone

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.plural_id:
            data["plural_id"] = self.plural_id
        data["forms"] = {index: self.forms[index] for index in sorted(self.forms)}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Translation:
        forms = {int(index): str(text) for index, text in (data.get("forms") or {}).items()}
        return cls(str(data.get("id", "")), str(data.get("plural_id", "")), forms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Translation):
            return NotImplemented
        return (self.id, self.plural_id, self.forms) == (other.id, other.plural_id, other.forms)

    def __repr__(self) -> str:
        return f"Translation(id={self.id!r}, plural_id={self.plural_id!r}, forms={self.forms!r})"
