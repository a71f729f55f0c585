"""
Topic model post-processing functions for speechtopics.

This module contains the read-only views derived from a fitted model: topic
names from beta, topic rankings over theta, threshold filtering of documents
and per-period averaging of topic proportions. All functions are pure; topics
are addressed by 1-based index, documents by 0-based row position.
"""

import numbers
import numpy as np
import pandas as pd
from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ._math_driver import lda_saliency_scores
from .dataframe_schema import CorpusSchema
from .exceptions import InvalidThresholdError, InvalidTopicIndexError, MissingMetadataError


# ============================================================================
# Enums and Helpers
# ============================================================================

class TopicNamingMode(Enum):
    """How terms are ranked within a topic when building its label
    TOP_PROBABILITY: by raw beta[k, w]
    SALIENCY: by a score discounting terms that are probable in many topics"""
    TOP_PROBABILITY = "top_probability"
    SALIENCY = "saliency"

    @classmethod
    def parse(cls, value) -> 'TopicNamingMode':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown topic naming mode: {value!r}. "
                             f"Use one of {[mode.value for mode in cls]}") from None


def default_topic_labels(n_topics: int) -> Dict[int, str]:
    return {k: f"Topic {k}" for k in range(1, n_topics + 1)}


def _as_matrix(matrix, name: str) -> np.ndarray:
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[0] == 0 or matrix.shape[1] == 0:
        raise ValueError(f"{name} must be a non-empty 2D matrix, got shape {matrix.shape}")
    return matrix


def _resolve_labels(topic_names: Optional[Mapping[int, str]], n_topics: int) -> Dict[int, str]:
    if topic_names is None:
        return default_topic_labels(n_topics)
    missing = [k for k in range(1, n_topics + 1) if k not in topic_names]
    if missing:
        raise ValueError(f"topic_names has no label for topics {missing}")
    return dict(topic_names)


# ============================================================================
# Topic Naming
# ============================================================================

def top_terms(beta,
              vocabulary: Sequence[str],
              n_terms: int = 5,
              mode=TopicNamingMode.TOP_PROBABILITY,
              scorer: Optional[Callable[[np.ndarray], np.ndarray]] = None) -> Dict[int, List[str]]:
    """
    Top-N terms per topic, best first. Ties are broken by term lexical order.

    Args:
        beta: topic-term matrix (K x V)
        vocabulary: term for each column of beta
        n_terms: number of terms per topic (capped at V)
        mode: TopicNamingMode or its string value
        scorer: optional callable beta -> (K x V) scores; overrides mode

    Returns:
        Dict mapping topic index (1..K) to its list of terms
    """
    beta = _as_matrix(beta, "beta")
    if len(vocabulary) != beta.shape[1]:
        raise ValueError(f"vocabulary has {len(vocabulary)} terms, beta has {beta.shape[1]} columns")
    if n_terms < 1:
        raise ValueError(f"n_terms must be >= 1, got {n_terms}")

    if scorer is not None:
        scores = np.asarray(scorer(beta), dtype=np.float64)
    elif TopicNamingMode.parse(mode) is TopicNamingMode.SALIENCY:
        scores = lda_saliency_scores(beta)
    else:
        scores = beta
    if scores.shape != beta.shape:
        raise ValueError(f"Term scores have shape {scores.shape}, expected {beta.shape}")

    terms = np.asarray(vocabulary, dtype=str)
    result = {}
    for k in range(beta.shape[0]):
        # lexsort: last key is primary
        order = np.lexsort((terms, -scores[k]))[:n_terms]
        result[k + 1] = [str(terms[j]) for j in order]
    return result


def name_topics(beta,
                vocabulary: Sequence[str],
                n_terms: int = 5,
                mode=TopicNamingMode.TOP_PROBABILITY,
                separator: str = " ",
                scorer: Optional[Callable[[np.ndarray], np.ndarray]] = None) -> Dict[int, str]:
    """Label each topic (1..K) by joining its top-N terms with separator"""
    terms_by_topic = top_terms(beta, vocabulary, n_terms=n_terms, mode=mode, scorer=scorer)
    return {k: separator.join(terms) for k, terms in terms_by_topic.items()}


# ============================================================================
# Topic Ranking
# ============================================================================

def topic_proportions(theta) -> np.ndarray:
    """Mean share of each topic over all documents"""
    theta = _as_matrix(theta, "theta")
    return theta.sum(axis=0) / theta.shape[0]


def dominant_topics(theta) -> np.ndarray:
    """1-based index of the most probable topic of each document; ties go to the lowest index"""
    theta = _as_matrix(theta, "theta")
    return theta.argmax(axis=1) + 1


def dominant_topic_counts(theta) -> np.ndarray:
    """Number of documents in which each topic is the most probable one"""
    theta = _as_matrix(theta, "theta")
    return np.bincount(theta.argmax(axis=1), minlength=theta.shape[1])


def _ranked(scores, labels: Dict[int, str]) -> List[Tuple[str, float]]:
    order = sorted(range(len(scores)), key=lambda i: (-scores[i], i))
    return [(labels[i + 1], scores[i]) for i in order]


def rank_topics_by_proportion(theta, topic_names: Optional[Mapping[int, str]] = None) -> List[Tuple[str, float]]:
    """(name, mean proportion) pairs, highest first, ties by topic index"""
    proportions = topic_proportions(theta)
    labels = _resolve_labels(topic_names, len(proportions))
    return _ranked([float(p) for p in proportions], labels)


def rank_topics_by_dominance(theta, topic_names: Optional[Mapping[int, str]] = None) -> List[Tuple[str, int]]:
    """(name, Rank-1 count) pairs, highest first, ties by topic index"""
    counts = dominant_topic_counts(theta)
    labels = _resolve_labels(topic_names, len(counts))
    return _ranked([int(c) for c in counts], labels)


# ============================================================================
# Document Filtering
# ============================================================================

def validate_topic_index(topic_index, n_topics: int) -> int:
    if isinstance(topic_index, bool) or not isinstance(topic_index, numbers.Integral):
        raise InvalidTopicIndexError(f"Topic index must be an integer, got {topic_index!r}")
    if not 1 <= topic_index <= n_topics:
        raise InvalidTopicIndexError(f"Topic index {topic_index} out of range [1, {n_topics}]")
    return int(topic_index)


def validate_threshold(threshold) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
        raise InvalidThresholdError(f"Threshold must be a number, got {threshold!r}")
    # NaN fails both comparisons
    if not 0.0 <= threshold <= 1.0:
        raise InvalidThresholdError(f"Threshold {threshold} out of range [0, 1]")
    return float(threshold)


def filter_documents_by_topic(theta, topic_index: int, threshold: float) -> np.ndarray:
    """
    Rows whose share of a topic reaches a threshold.

    Args:
        theta: document-topic matrix (D x K)
        topic_index: topic in [1, K]
        threshold: minimum share in [0, 1]

    Returns:
        Ascending array of 0-based row positions d with theta[d, k] >= threshold
    """
    theta = _as_matrix(theta, "theta")
    k = validate_topic_index(topic_index, theta.shape[1])
    threshold = validate_threshold(threshold)
    return np.flatnonzero(theta[:, k - 1] >= threshold)


# ============================================================================
# Temporal Aggregation
# ============================================================================

def decade_key(date_value) -> str:
    """'1987-01-27' -> '1980'"""
    return str(date_value).strip()[:3] + "0"


def year_key(date_value) -> str:
    """'1987-01-27' -> '1987'"""
    return str(date_value).strip()[:4]


def aggregate_by_period(theta,
                        metadata: pd.DataFrame,
                        key_func: Callable[[object], str] = decade_key,
                        field: str = CorpusSchema.DATE.colname) -> Dict[str, np.ndarray]:
    """
    Mean topic distribution per time bucket.

    Args:
        theta: document-topic matrix (D x K)
        metadata: per-document dataframe aligned row-for-row with theta
        key_func: derives the bucket key from the field value (default: decade)
        field: metadata column holding the date

    Returns:
        Dict of bucket -> K-length mean distribution, keys sorted; buckets
        without documents are absent

    Raises:
        MissingMetadataError: the field is missing for any document
    """
    theta = _as_matrix(theta, "theta")
    if len(metadata) != theta.shape[0]:
        raise ValueError(f"metadata has {len(metadata)} rows, theta has {theta.shape[0]}")
    if field not in metadata.columns:
        raise MissingMetadataError(f"Metadata has no '{field}' column")

    values = metadata[field].tolist()
    missing = [row for row, value in enumerate(values)
               if value is None or pd.isna(value) or not str(value).strip()]
    if missing:
        raise MissingMetadataError(f"'{field}' missing for {len(missing)} documents, "
                                   f"first rows: {missing[:5]}")

    rows_by_bucket = defaultdict(list)
    for row, value in enumerate(values):
        rows_by_bucket[key_func(value)].append(row)

    return {bucket: theta[rows_by_bucket[bucket]].mean(axis=0) for bucket in sorted(rows_by_bucket)}


def period_topic_frame(aggregates: Mapping[str, np.ndarray],
                       topic_names: Optional[Mapping[int, str]] = None) -> pd.DataFrame:
    """Buckets x topics dataframe from aggregate_by_period output"""
    buckets = list(aggregates)
    if not buckets:
        return pd.DataFrame()
    n_topics = len(aggregates[buckets[0]])
    labels = _resolve_labels(topic_names, n_topics)
    return pd.DataFrame(np.vstack([aggregates[b] for b in buckets]),
                        index=pd.Index(buckets, name="period"),
                        columns=[labels[k] for k in range(1, n_topics + 1)])


def document_topic_frame(theta,
                         doc_ids: Sequence[str],
                         topic_names: Optional[Mapping[int, str]] = None,
                         rows: Optional[Sequence[int]] = None) -> pd.DataFrame:
    """Documents x topics dataframe of theta, optionally restricted to some rows"""
    theta = _as_matrix(theta, "theta")
    if len(doc_ids) != theta.shape[0]:
        raise ValueError(f"Got {len(doc_ids)} doc_ids for {theta.shape[0]} theta rows")
    labels = _resolve_labels(topic_names, theta.shape[1])
    rows = list(range(theta.shape[0])) if rows is None else list(rows)
    return pd.DataFrame(theta[rows],
                        index=pd.Index([doc_ids[r] for r in rows], name=CorpusSchema.DOC_ID.colname),
                        columns=[labels[k] for k in range(1, theta.shape[1] + 1)])
