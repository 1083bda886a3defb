"""
Add/Edit record form.

Four text buffers indexed by Field, a focus pointer and an optional error.
validate_and_build() turns the buffers into a Record or raises
ValidationError naming the first field that failed.
"""

import math
from enum import IntEnum
from typing import List, Optional

from fruitcat import Record


class Field(IntEnum):
    NAME = 0
    LENGTH = 1
    WIDTH = 2
    HEIGHT = 3

    @property
    def label(self):
        return self.name.capitalize()

    @property
    def numeric(self):
        return self is not Field.NAME


FIELD_COUNT = len(Field)


class ValidationError(ValueError):
    """A form field failed validation"""

    def __init__(self, field: Field, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ModalForm:
    """Text buffers for one record being added or edited"""

    def __init__(self, buffers: Optional[List[str]] = None):
        self.buffers = list(buffers) if buffers else [""] * FIELD_COUNT
        self.focused = Field.NAME
        self.error: Optional[str] = None

    @classmethod
    def from_record(cls, record: Record) -> "ModalForm":
        return cls([record.name, str(record.length),
                    str(record.width), str(record.height)])

    def value(self, field: Field) -> str:
        return self.buffers[field]

    # -- focus ---------------------------------------------------------------

    def next_field(self):
        self.focused = Field((self.focused + 1) % FIELD_COUNT)

    def prev_field(self):
        self.focused = Field((self.focused - 1) % FIELD_COUNT)

    # -- editing -------------------------------------------------------------

    def insert_char(self, ch: str) -> bool:
        """
        Append *ch* to the focused buffer. Numeric buffers take digits and
        at most one '.'; returns False if the character was rejected.
        """
        buf = self.buffers[self.focused]
        if self.focused.numeric:
            if not (ch.isdigit() or (ch == '.' and '.' not in buf)):
                return False
        self.buffers[self.focused] = buf + ch
        self.error = None
        return True

    def backspace(self):
        self.buffers[self.focused] = self.buffers[self.focused][:-1]


def _parse_dimension(form: ModalForm, field: Field) -> float:
    text = form.value(field).strip()
    try:
        value = float(text)
    except ValueError:
        raise ValidationError(field, f"{field.label} must be a valid number")
    if not math.isfinite(value):
        raise ValidationError(field, f"{field.label} must be a valid number")
    if value <= 0:
        raise ValidationError(field, f"{field.label} must be greater than zero")
    return value


def validate_and_build(form: ModalForm) -> Record:
    """
    Build a Record from the form buffers.

    Fields are checked in order name, length, width, height and the first
    failure is raised as ValidationError. The form itself is not modified.
    """
    name = form.value(Field.NAME).strip()
    if not name:
        raise ValidationError(Field.NAME, "Name cannot be empty")

    length = _parse_dimension(form, Field.LENGTH)
    width = _parse_dimension(form, Field.WIDTH)
    height = _parse_dimension(form, Field.HEIGHT)
    return Record(name, length, width, height)
