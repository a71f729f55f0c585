"""
Test cases for the _file_driver.py and _math_driver.py modules
"""

import pytest
import numpy as np
import logging
import tempfile
import shutil
from pathlib import Path
from unittest.mock import Mock, patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from speechtopics._file_driver import (
    log_print, load_stopwords, load_lemma_map, write_pickle, read_pickle, get_date_hour_minute
)
from speechtopics._math_driver import (
    lda_saliency_scores, term_relevance_scores, is_row_stochastic, normalize_rows
)


class TestLogPrint:
    """Test the log_print helper"""

    def test_uses_given_logger_level(self):
        logger = Mock(spec=logging.Logger)
        log_print("hello", level="warning", logger=logger)
        logger.warning.assert_called_once_with("hello")

    def test_defaults_to_package_logger(self):
        with patch('speechtopics._file_driver.logging.getLogger') as mock_get_logger:
            log_print("hello")
        mock_get_logger.assert_called_once_with("SpeechTopics")
        mock_get_logger.return_value.info.assert_called_once_with("hello")

    def test_also_print(self, capsys):
        log_print("shown", logger=Mock(spec=logging.Logger), also_print=True)
        assert "shown" in capsys.readouterr().out


class TestResourceFiles:
    """Test stopword and lemma mapping readers"""

    @pytest.fixture
    def temp_dir(self):
        temp_dir = tempfile.mkdtemp()
        yield Path(temp_dir)
        shutil.rmtree(temp_dir)

    def test_load_stopwords(self, temp_dir):
        path = temp_dir / "stopwords_en.txt"
        path.write_text("\ufeffThe\nand\n\n# comment\n  of  \n", encoding="utf-8")
        assert load_stopwords(path) == {"the", "and", "of"}

    def test_load_lemma_map_tab_separated(self, temp_dir):
        path = temp_dir / "baseform_en.tsv"
        path.write_text("inflected_form\tlemma\nnations\tnation\nwas\tbe\n", encoding="utf-8")
        assert load_lemma_map(path) == {"nations": "nation", "was": "be"}

    def test_load_lemma_map_comma_separated(self, temp_dir):
        path = temp_dir / "lemmas.csv"
        path.write_text("Children,child\ngoes,go\n", encoding="utf-8")
        assert load_lemma_map(path) == {"children": "child", "goes": "go"}

    def test_load_lemma_map_first_mapping_wins(self, temp_dir):
        path = temp_dir / "lemmas.tsv"
        path.write_text("saw\tsee\nsaw\tsaw\n", encoding="utf-8")
        assert load_lemma_map(path)["saw"] == "see"

    def test_load_lemma_map_malformed_line(self, temp_dir):
        path = temp_dir / "lemmas.tsv"
        path.write_text("nations\tnation\nbroken\n", encoding="utf-8")
        with pytest.raises(ValueError, match="line 2"):
            load_lemma_map(path)


class TestFileOperations:
    """Test pickle and naming helpers"""

    def test_pickle_roundtrip(self, tmp_path):
        file_path = tmp_path / "nested" / "data.pkl"
        write_pickle(str(file_path), {"a": [1, 2]})
        assert read_pickle(str(file_path)) == {"a": [1, 2]}

    def test_write_pickle_no_overwrite(self, tmp_path):
        file_path = tmp_path / "data.pkl"
        write_pickle(str(file_path), "first")
        write_pickle(str(file_path), "second", overwrite=False)
        assert read_pickle(str(file_path)) == "first"

    def test_get_date_hour_minute_format(self):
        timestr = get_date_hour_minute()
        date_part, time_part = timestr.split("_")
        assert len(date_part) == 8 and date_part.isdigit()
        assert len(time_part) == 4 and time_part.isdigit()


class TestSaliencyScores:
    """Test the topic-term saliency score used for topic naming"""

    def test_matches_formula(self):
        beta = np.array([[0.7, 0.2, 0.1], [0.1, 0.2, 0.7]])
        eps = 1e-5
        b = beta / (beta.sum(axis=1, keepdims=True) + eps)
        log_b = np.log(b + eps)
        expected = b * (log_b - log_b.mean(axis=0))
        np.testing.assert_allclose(lda_saliency_scores(beta), expected)

    def test_term_shared_by_all_topics_scores_zero(self):
        beta = np.array([[0.5, 0.5, 0.0], [0.0, 0.5, 0.5]])
        scores = lda_saliency_scores(beta)
        assert scores[0, 1] == pytest.approx(0.0, abs=1e-9)
        assert scores[0, 0] > scores[0, 1]


class TestTermRelevance:
    """Test LDAvis relevance scores"""

    def test_lambda_one_ranks_by_probability(self):
        beta = np.array([[0.6, 0.3, 0.1], [0.1, 0.1, 0.8]])
        relevance = term_relevance_scores(beta, [10, 5, 5], lambda_param=1.0)
        np.testing.assert_array_equal(np.argsort(-relevance[0]), np.argsort(-beta[0]))

    def test_invalid_lambda(self):
        with pytest.raises(ValueError):
            term_relevance_scores(np.ones((2, 2)) / 2, [1, 1], lambda_param=1.5)

    def test_frequency_shape_mismatch(self):
        with pytest.raises(ValueError):
            term_relevance_scores(np.ones((2, 2)) / 2, [1, 1, 1])


class TestProbabilityChecks:
    """Test row-stochastic checks and normalization"""

    def test_is_row_stochastic(self):
        assert is_row_stochastic([[0.5, 0.5], [1.0, 0.0]])
        assert not is_row_stochastic([[0.5, 0.6]])
        assert not is_row_stochastic([[1.2, -0.2]])
        assert not is_row_stochastic([[np.nan, 1.0]])
        assert not is_row_stochastic([0.5, 0.5])

    def test_normalize_rows(self):
        normalized = normalize_rows([[1, 3], [2, 2]])
        np.testing.assert_allclose(normalized, [[0.25, 0.75], [0.5, 0.5]])
        assert normalized.dtype == np.float64
