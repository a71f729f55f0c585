"""
Test cases for dataframe_schema.py module
"""

import pytest
import numpy as np
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from speechtopics.dataframe_schema import CorpusSchema, FieldDef, _clean_str


class TestCleanStr:
    """Test the field value cleaner"""

    @pytest.mark.parametrize("value", [None, np.nan, "", "   "])
    def test_missing_values_become_none(self, value):
        assert _clean_str(value) is None

    def test_strips_and_stringifies(self):
        assert _clean_str("  1987-01-27 ") == "1987-01-27"
        assert _clean_str(42) == "42"


class TestCorpusSchema:
    """Test the corpus column schema"""

    def test_fields_are_fielddefs(self):
        for field in CorpusSchema:
            assert isinstance(field.value, FieldDef)

    def test_colnames(self):
        assert CorpusSchema.all_colnames() == ["doc_id", "text", "date", "preprocessed_text"]
        assert CorpusSchema.required_colnames() == ["doc_id", "text", "date"]

    def test_required_flags(self):
        assert CorpusSchema.DOC_ID.required
        assert not CorpusSchema.PREPROCESSED_TEXT.required

    def test_extractors(self):
        entry = {"doc_id": " 12 ", "text": "Mr. Speaker", "date": "1790-01-08"}
        assert CorpusSchema.DOC_ID.get_extractor()(entry) == "12"
        assert CorpusSchema.TEXT.get_extractor()(entry) == "Mr. Speaker"
        assert CorpusSchema.DATE.get_extractor()(entry) == "1790-01-08"
        assert CorpusSchema.PREPROCESSED_TEXT.get_extractor()(entry) is None

    def test_missing_field_extracts_none(self):
        assert CorpusSchema.DATE.get_extractor()({"doc_id": "1"}) is None

    def test_all_fields(self):
        assert CorpusSchema.all_fields() == list(CorpusSchema)
