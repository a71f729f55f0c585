"""
Mathematical functions for speechtopics.

Term scoring for topic labels and probability-matrix checks used by the
inference adapter.
"""

import numpy as np


# ============================================================================
# Term Scoring
# ============================================================================

def lda_saliency_scores(beta, epsilon=1e-5):
    """
    Per-topic term scores that discount terms probable in many topics.

    score[k, w] = b[k, w] * (log(b[k, w] + eps) - mean_j log(b[j, w] + eps))

    where b is beta with each row renormalized. This is the score behind
    top.topic.words(by.score=TRUE) in the R lda package: a term-level analogue
    of tf-idf in which "documents" are topics.

    Args:
        beta: topic-term matrix (K x V)
        epsilon: smoothing constant inside the logarithm

    Returns:
        Score matrix of shape (K, V)
    """
    beta = np.asarray(beta, dtype=np.float64)
    normalized = beta / (beta.sum(axis=1, keepdims=True) + epsilon)
    log_beta = np.log(normalized + epsilon)
    return normalized * (log_beta - log_beta.mean(axis=0, keepdims=True))


def term_relevance_scores(beta, term_frequencies, lambda_param=0.6, epsilon=1e-12):
    """
    LDAvis term relevance (Sievert & Shirley 2014).

    relevance[k, w] = lambda * log p(w|k) + (1 - lambda) * log(p(w|k) / p(w))

    Args:
        beta: topic-term matrix (K x V), rows are p(w|k)
        term_frequencies: corpus count of each term (V), gives p(w)
        lambda_param: weight in [0, 1]; 1 ranks by raw probability
        epsilon: smoothing constant

    Returns:
        Score matrix of shape (K, V)
    """
    if lambda_param < 0 or lambda_param > 1:
        raise ValueError(f"lambda_param {lambda_param} is not a legal input")

    beta = np.asarray(beta, dtype=np.float64)
    term_frequencies = np.asarray(term_frequencies, dtype=np.float64)
    if term_frequencies.shape != (beta.shape[1],):
        raise ValueError(f"term_frequencies has shape {term_frequencies.shape}, expected ({beta.shape[1]},)")

    p_w = term_frequencies / term_frequencies.sum()
    log_p_w_given_k = np.log(beta + epsilon)
    log_p_w = np.log(p_w + epsilon)
    return lambda_param * log_p_w_given_k + (1 - lambda_param) * (log_p_w_given_k - log_p_w)


# ============================================================================
# Probability Matrix Checks
# ============================================================================

def is_row_stochastic(matrix, atol=1e-6):
    """True if every entry is finite and non-negative and every row sums to 1 within atol"""
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2:
        return False
    if not np.all(np.isfinite(matrix)) or np.any(matrix < 0):
        return False
    return bool(np.all(np.abs(matrix.sum(axis=1) - 1.0) <= atol))


def normalize_rows(matrix):
    """Scale each row of a non-negative matrix to sum to 1"""
    matrix = np.asarray(matrix, dtype=np.float64)
    return matrix / matrix.sum(axis=1, keepdims=True)
