"""
Test cases for data_loaders.py module
"""

import pytest
import pandas as pd
import tempfile
import shutil
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from speechtopics.data_loaders import DataLoader, DelimitedTextDataLoader, load_corpus
from speechtopics.dataframe_schema import CorpusSchema
from speechtopics.exceptions import MissingMetadataError


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing"""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def semicolon_corpus(temp_dir):
    """Small State-of-the-Union style corpus with ';' delimiter"""
    path = temp_dir / "sotu.csv"
    path.write_text(
        "doc_id;speech_type;president;date;text\n"
        "1;State of the Union Address;George Washington;1790-01-08;Fellow-Citizens of the Senate\n"
        "2;State of the Union Address;George Washington;1790-12-08;In meeting you again\n"
        "3;State of the Union Address;John Adams;1797-11-22;Gentlemen of the Senate\n"
        "4;State of the Union Address;John Adams;;Missing date here\n",
        encoding="utf-8",
    )
    return path


class ConcreteDataLoader(DataLoader):
    """Concrete implementation of DataLoader for testing"""

    def __init__(self, input_path, entries, **kwargs):
        super().__init__(input_path, **kwargs)
        self.entries = entries

    def _load_raw_data(self):
        self.raw_data.extend(self.entries)


class TestDataLoaderBase:
    """Test cases for DataLoader abstract base class"""

    def test_dataloader_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            DataLoader("input.csv")

    def test_missing_file(self, temp_dir):
        loader = ConcreteDataLoader(temp_dir / "missing.csv", [])
        with pytest.raises(FileNotFoundError):
            loader.run()

    def test_clean_df_before_run(self, temp_dir):
        loader = ConcreteDataLoader(temp_dir / "x.csv", [])
        with pytest.raises(RuntimeError, match="Validation not run"):
            loader.get_clean_df()

    def test_field_mapping(self, temp_dir):
        path = temp_dir / "x.csv"
        path.write_text("")
        entries = [{"id": "a", "speech": "words here", "date": "1801-12-08"}]
        loader = ConcreteDataLoader(path, entries, input_schema_map={"id": "doc_id", "speech": "text"})
        df = loader.run()
        assert df.loc[0, "doc_id"] == "a"
        assert df.loc[0, "text"] == "words here"
        assert "id" not in df.columns

    def test_missing_required_column(self, temp_dir):
        path = temp_dir / "x.csv"
        path.write_text("")
        loader = ConcreteDataLoader(path, [{"doc_id": "1", "text": "no date column"}])
        with pytest.raises(MissingMetadataError, match="date"):
            loader.run()

    def test_duplicate_doc_ids_keep_first(self, temp_dir):
        path = temp_dir / "x.csv"
        path.write_text("")
        entries = [
            {"doc_id": "1", "text": "first", "date": "1900"},
            {"doc_id": "1", "text": "second", "date": "1901"},
        ]
        loader = ConcreteDataLoader(path, entries)
        df = loader.run()
        assert df["text"].tolist() == ["first"]
        assert loader.get_na_df()["text"].tolist() == ["second"]

    def test_run_twice_does_not_duplicate(self, temp_dir):
        path = temp_dir / "x.csv"
        path.write_text("")
        loader = ConcreteDataLoader(path, [{"doc_id": "1", "text": "t", "date": "1900"}])
        loader.run()
        assert len(loader.run()) == 1

    def test_empty_source(self, temp_dir):
        path = temp_dir / "x.csv"
        path.write_text("")
        df = ConcreteDataLoader(path, []).run()
        assert df.empty
        assert set(CorpusSchema.all_colnames()) <= set(df.columns)


class TestDelimitedTextDataLoader:
    """Test cases for the delimited text loader"""

    def test_load_semicolon_corpus(self, semicolon_corpus):
        loader = DelimitedTextDataLoader(semicolon_corpus, delimiter=";")
        df = loader.run()
        assert df["doc_id"].tolist() == ["1", "2", "3"]
        assert df["president"].tolist() == ["George Washington", "George Washington", "John Adams"]
        assert df["date"].iloc[0] == "1790-01-08"
        # Row 4 has no date
        assert loader.get_na_df()["doc_id"].tolist() == ["4"]

    def test_infers_delimiter_from_extension(self, temp_dir):
        path = temp_dir / "corpus.tsv"
        path.write_text("doc_id\ttext\tdate\nA\tsome text\t2001-01-20\n", encoding="utf-8")
        df = DelimitedTextDataLoader(path).run()
        assert df.loc[0, "doc_id"] == "A"

    def test_uninferable_delimiter(self, temp_dir):
        path = temp_dir / "corpus.txt"
        path.write_text("doc_id|text|date\n", encoding="utf-8")
        with pytest.raises(ValueError, match="delimiter"):
            DelimitedTextDataLoader(path).run()

    def test_multiple_files_in_order(self, temp_dir):
        first = temp_dir / "a.csv"
        second = temp_dir / "b.csv"
        first.write_text("doc_id,text,date\n1,one,1900\n", encoding="utf-8")
        second.write_text("doc_id,text,date\n2,two,1910\n", encoding="utf-8")
        df = DelimitedTextDataLoader([first, second]).run()
        assert df["doc_id"].tolist() == ["1", "2"]

    def test_date_range_filter(self, semicolon_corpus):
        df = load_corpus(semicolon_corpus, delimiter=";",
                         data_filters={"date_range": {"start": "1790-06-01", "end": "1797-12-31"}})
        assert df["doc_id"].tolist() == ["2", "3"]

    def test_custom_filter(self, semicolon_corpus):
        df = load_corpus(semicolon_corpus, delimiter=";",
                         data_filters={"custom": {"function": lambda d: d["president"] == "John Adams"}})
        assert df["doc_id"].tolist() == ["3"]

    def test_unknown_filter(self, semicolon_corpus):
        with pytest.raises(ValueError, match="Unknown filter"):
            load_corpus(semicolon_corpus, delimiter=";", data_filters={"speaker": "x"})
