"""
Plotting helpers for fitted speech topic models.

Word clouds of single topics, bar charts of topic rankings, per-document topic
shares, topic proportions over time periods and an interactive LDAvis view.
Every plotting function returns the matplotlib figure and only calls
plt.show() when asked to.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import pyLDAvis
from typing import List, Mapping, Optional, Sequence, Tuple
from wordcloud import WordCloud

from ._math_driver import term_relevance_scores
from ._topic_model_driver import validate_topic_index


def _check_distribution(values, name: str) -> np.ndarray:
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        raise ValueError(f"{name} is empty")
    if not np.all(np.isfinite(values)) or np.any(values < 0):
        raise ValueError(f"{name} must contain finite, non-negative values")
    return values


def _finish(fig, save_path: Optional[str], show: bool):
    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches="tight")
    if show:
        plt.show()
    return fig


def topic_wordcloud(beta,
                    vocabulary: Sequence[str],
                    topic_index: int,
                    num_top_terms: int = 100,
                    lambda_param: Optional[float] = None,
                    term_frequencies=None,
                    save_path: Optional[str] = None,
                    show: bool = False):
    """
    Word cloud of one topic, word sizes proportional to p(w|k).

    Parameters:
    beta: np.array
        Topic-term matrix (K x V).
    vocabulary: list
        Term for each column of beta.
    topic_index: int
        Topic in [1, K].
    num_top_terms: int
        Number of terms drawn in the cloud.
    lambda_param: float, optional
        If given together with term_frequencies, terms are selected by LDAvis
        relevance instead of raw probability.
    term_frequencies: np.array, optional
        Corpus count of each term.

    Returns:
    matplotlib.figure.Figure
    """
    beta = _check_distribution(beta, "beta")
    k = validate_topic_index(topic_index, beta.shape[0]) - 1
    p_w_given_k = beta[k]

    if lambda_param is not None and term_frequencies is not None:
        scores = term_relevance_scores(beta, term_frequencies, lambda_param=lambda_param)[k]
    else:
        scores = p_w_given_k
    top_term_indices = np.argsort(scores)[-num_top_terms:][::-1]
    top_term_freqs = {vocabulary[i]: p_w_given_k[i] for i in top_term_indices if p_w_given_k[i] > 0}
    if not top_term_freqs:
        raise ValueError(f"Topic {topic_index} has no terms with positive probability")

    wc = WordCloud(width=800, height=400, background_color="white",
                   max_words=num_top_terms).generate_from_frequencies(top_term_freqs)

    fig = plt.figure(figsize=(10, 5))
    plt.imshow(wc, interpolation='bilinear')
    plt.axis('off')
    plt.title(f"Topic {topic_index}")
    return _finish(fig, save_path, show)


def plot_topic_ranking(ranking: List[Tuple[str, float]],
                       title: str = "Topic ranking",
                       xlabel: str = "Score",
                       top_n: Optional[int] = None,
                       save_path: Optional[str] = None,
                       show: bool = False):
    """Horizontal bar chart of (name, score) pairs as returned by the topic rankers"""
    if top_n is not None:
        ranking = ranking[:top_n]
    if not ranking:
        raise ValueError("ranking is empty")
    names = [name for name, _ in ranking]
    scores = _check_distribution([score for _, score in ranking], "ranking scores")

    fig, ax = plt.subplots(figsize=(10, max(3, 0.4 * len(names))))
    # Highest score on top
    positions = list(range(len(names)))[::-1]
    ax.barh(positions, scores, color="steelblue")
    ax.set_yticks(positions)
    ax.set_yticklabels(names)
    ax.set_xlabel(xlabel)
    ax.set_title(title)
    fig.tight_layout()
    return _finish(fig, save_path, show)


def plot_document_topics(theta_row,
                         topic_names: Optional[Mapping[int, str]] = None,
                         title: str = "Document topic distribution",
                         save_path: Optional[str] = None,
                         show: bool = False):
    """Bar chart of one document's topic shares"""
    theta_row = _check_distribution(theta_row, "theta_row").ravel()
    n_topics = len(theta_row)
    labels = [topic_names[k] if topic_names else f"Topic {k}" for k in range(1, n_topics + 1)]

    fig, ax = plt.subplots(figsize=(max(6, 0.5 * n_topics), 4))
    ax.bar(range(n_topics), theta_row, color="steelblue")
    ax.set_xticks(range(n_topics))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_ylim(0, 1)
    ax.set_ylabel("Topic share")
    ax.set_title(title)
    fig.tight_layout()
    return _finish(fig, save_path, show)


def plot_topic_proportions_by_period(period_frame: pd.DataFrame,
                                     topics: Optional[Sequence[str]] = None,
                                     title: str = "Topic proportions by period",
                                     save_path: Optional[str] = None,
                                     show: bool = False):
    """
    Line plot of mean topic proportions per period.

    period_frame is the (period x topic) dataframe returned by
    SpeechTopicsOrchestrator.aggregate_by_period; topics restricts the plotted columns.
    """
    if period_frame.empty:
        raise ValueError("period_frame is empty")
    frame = period_frame[list(topics)] if topics is not None else period_frame
    _check_distribution(frame.values, "period proportions")

    fig, ax = plt.subplots(figsize=(12, 5))
    for column in frame.columns:
        ax.plot(frame.index.astype(str), frame[column], marker="o", label=column)
    ax.set_xlabel(frame.index.name or "period")
    ax.set_ylabel("Mean topic proportion")
    ax.set_title(title)
    ax.legend(loc="center left", bbox_to_anchor=(1.0, 0.5), fontsize="small")
    fig.tight_layout()
    return _finish(fig, save_path, show)


def prepare_ldavis(model_result, dtm, save_html: Optional[str] = None, **kwargs):
    """
    Build the LDAvis interactive view of a fitted model.

    Args:
        model_result: TopicModelResult
        dtm: the DocumentTermMatrix the model was fitted on
        save_html: optional path of an HTML file to write
        **kwargs: passed to pyLDAvis.prepare (e.g. R, lambda_step, sort_topics)

    Returns:
        pyLDAvis PreparedData
    """
    if model_result.doc_ids != dtm.doc_ids:
        raise ValueError("Model result and document-term matrix do not describe the same documents")
    vis_data = pyLDAvis.prepare(
        topic_term_dists=np.asarray(model_result.beta),
        doc_topic_dists=np.asarray(model_result.theta),
        doc_lengths=dtm.document_lengths(),
        vocab=list(dtm.vocabulary),
        term_frequency=dtm.term_frequencies(),
        **kwargs
    )
    if save_html:
        pyLDAvis.save_html(vis_data, save_html)
    return vis_data
