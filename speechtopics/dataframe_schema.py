"""
dataframe_schema.py

Defines the column schema of the corpus dataframe
"""

from enum import Enum
from collections import namedtuple


def _clean_str(value):
    """Strip a raw field value; missing and blank values become None"""
    if value is None:
        return None
    # pandas hands over NaN for empty cells when dtype inference is on
    if isinstance(value, float) and value != value:
        return None
    value = str(value).strip()
    return value or None


# Each schema column needs to be defined in this format, with an extractor method
# The extractor method should perform basic minimal processing of the field
FieldDef = namedtuple("FieldDef", ["column_name", "extractor", "type", "required"])


class CorpusSchema(Enum):
    """
    Defines the columns of the corpus dataframe after loading data
    """
    DOC_ID = FieldDef(
        "doc_id",
        lambda entry: _clean_str(entry.get("doc_id")),
        str,
        True
    )
    TEXT = FieldDef(
        "text",
        lambda entry: _clean_str(entry.get("text")),
        str,
        True
    )
    # Kept as the raw string; period keys are derived from its leading characters
    DATE = FieldDef(
        "date",
        lambda entry: _clean_str(entry.get("date")),
        str,
        True
    )
    PREPROCESSED_TEXT = FieldDef("preprocessed_text", lambda entry: None, list, False)

    @property
    def colname(self):
        return self.value.column_name

    @property
    def required(self):
        return self.value.required

    def get_extractor(self):
        return self.value.extractor

    @classmethod
    def all_colnames(cls):
        return [field.colname for field in cls]

    @classmethod
    def required_colnames(cls):
        return [field.colname for field in cls if field.required]

    @classmethod
    def all_fields(cls):
        return list(cls)
