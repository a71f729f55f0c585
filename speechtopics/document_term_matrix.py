"""
Document-term matrix construction.

Builds the sparse documents x vocabulary count matrix that feeds the topic
model, pruning rare and excluded terms and dropping documents left empty.
"""

import math
import numpy as np
import pandas as pd
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, List, Optional, Sequence, Tuple
from gensim import corpora
from gensim.matutils import corpus2csc
from scipy.sparse import csr_matrix

from .exceptions import DegenerateVocabularyError
from ._file_driver import log_print


@dataclass(frozen=True)
class DocumentTermMatrix:
    """
    Immutable documents x terms count matrix.

    Attributes:
        counts: csr_matrix of shape (n_documents, n_terms) with integer counts
        vocabulary: term for each column
        doc_ids: document id for each row
        kept_rows: position of each row in the tokenized input, used to align
            per-document metadata after empty documents were dropped
    """
    counts: csr_matrix
    vocabulary: Tuple[str, ...]
    doc_ids: Tuple[str, ...]
    kept_rows: np.ndarray

    @property
    def n_documents(self) -> int:
        return self.counts.shape[0]

    @property
    def n_terms(self) -> int:
        return self.counts.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.counts.shape

    def document_frequencies(self) -> np.ndarray:
        """Number of documents containing each term"""
        return np.asarray((self.counts > 0).sum(axis=0)).ravel()

    def term_frequencies(self) -> np.ndarray:
        """Total count of each term over the corpus"""
        return np.asarray(self.counts.sum(axis=0)).ravel()

    def document_lengths(self) -> np.ndarray:
        """Total token count of each document"""
        return np.asarray(self.counts.sum(axis=1)).ravel()

    def to_bow_corpus(self) -> List[List[Tuple[int, int]]]:
        """gensim bag-of-words view: one list of (term_id, count) per document"""
        corpus = []
        for row in range(self.n_documents):
            start, end = self.counts.indptr[row], self.counts.indptr[row + 1]
            corpus.append([
                (int(term_id), int(count))
                for term_id, count in zip(self.counts.indices[start:end], self.counts.data[start:end])
            ])
        return corpus

    def id2word(self) -> dict:
        return dict(enumerate(self.vocabulary))

    def to_frame(self) -> pd.DataFrame:
        """Dense dataframe view, rows indexed by doc_id; meant for small matrices"""
        return pd.DataFrame(self.counts.toarray(), index=list(self.doc_ids), columns=list(self.vocabulary))

    def align(self, metadata: pd.DataFrame) -> pd.DataFrame:
        """Select the metadata rows that survived into the matrix, in matrix row order"""
        return metadata.iloc[self.kept_rows].reset_index(drop=True)


def build_document_term_matrix(tokenized_docs: Sequence[Sequence[str]],
                               doc_ids: Optional[Sequence] = None,
                               min_doc_proportion: float = 0.01,
                               excluded_terms: Optional[Iterable[str]] = None) -> DocumentTermMatrix:
    """
    Build a pruned document-term matrix from tokenized documents.

    A term is kept if it occurs in at least ceil(min_doc_proportion * D)
    documents (D = number of input documents) and is not excluded. Documents
    without any kept term are dropped; DocumentTermMatrix.kept_rows records
    which input rows survived.

    Args:
        tokenized_docs: one token list per document
        doc_ids: unique id per document; defaults to "1".."D"
        min_doc_proportion: minimum document frequency as a share of D, in [0, 1]
        excluded_terms: terms to drop regardless of frequency

    Returns:
        DocumentTermMatrix

    Raises:
        DegenerateVocabularyError: pruning left no terms
    """
    if not 0.0 <= min_doc_proportion <= 1.0:
        raise ValueError(f"min_doc_proportion must be in [0, 1], got {min_doc_proportion}")

    docs = [list(doc) for doc in tokenized_docs]
    n_docs = len(docs)
    if doc_ids is None:
        doc_ids = [str(i) for i in range(1, n_docs + 1)]
    doc_ids = [str(doc_id) for doc_id in doc_ids]
    if len(doc_ids) != n_docs:
        raise ValueError(f"Got {len(doc_ids)} doc_ids for {n_docs} documents")
    if len(set(doc_ids)) != n_docs:
        raise ValueError("doc_ids must be unique")

    dictionary = corpora.Dictionary(docs)
    vocab_initial = len(dictionary)

    # Exact product; 0.07 * 100 is 7.000000000000001 in floating point
    min_docs = math.ceil(Fraction(str(min_doc_proportion)) * n_docs)
    bad_ids = {token_id for token_id, doc_freq in dictionary.dfs.items() if doc_freq < min_docs}
    excluded = set(excluded_terms or [])
    bad_ids.update(dictionary.token2id[term] for term in excluded if term in dictionary.token2id)
    dictionary.filter_tokens(bad_ids=list(bad_ids))

    if len(dictionary) == 0:
        raise DegenerateVocabularyError(
            f"No terms left after pruning {vocab_initial} terms "
            f"(min document frequency {min_docs} of {n_docs} documents, {len(excluded)} excluded terms)"
        )
    log_print(f"Vocabulary pruned from {vocab_initial} to {len(dictionary)} terms "
              f"(min document frequency {min_docs})", level="info")

    bow_corpus = [dictionary.doc2bow(doc) for doc in docs]
    counts = corpus2csc(bow_corpus, num_terms=len(dictionary), num_docs=n_docs, dtype=np.int64).T.tocsr()

    row_sums = np.asarray(counts.sum(axis=1)).ravel()
    kept_rows = np.flatnonzero(row_sums > 0)
    if len(kept_rows) < n_docs:
        log_print(f"Dropping {n_docs - len(kept_rows)} documents left empty after pruning", level="warning")
        counts = counts[kept_rows]
    counts.sort_indices()

    return DocumentTermMatrix(
        counts=counts,
        vocabulary=tuple(dictionary[token_id] for token_id in range(len(dictionary))),
        doc_ids=tuple(doc_ids[row] for row in kept_rows),
        kept_rows=kept_rows,
    )
