"""
Core speechtopics functionality.

This module provides the topic model adapter (inference engine interface,
gensim and scikit-learn engines, output contract checks) and the
SpeechTopicsOrchestrator, the user-facing pipeline that goes from a corpus
file to topic names, rankings, filtered documents and per-period topic
proportions.
"""

import copy
import json
import logging
import numbers
import os
import numpy as np
import pandas as pd
import yaml

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from gensim.models import LdaModel
from sklearn.decomposition import LatentDirichletAllocation

from .dataframe_schema import CorpusSchema
from .data_loaders import DataLoader, DelimitedTextDataLoader
from .document_term_matrix import DocumentTermMatrix, build_document_term_matrix
from .exceptions import InferenceContractViolationError, InvalidTopicCountError
from .text_preprocessing import PreprocessConfig, TextPreprocessor
from ._file_driver import get_date_hour_minute, log_print, write_pickle
from ._math_driver import is_row_stochastic, normalize_rows
from ._topic_model_driver import (
    TopicNamingMode,
    aggregate_by_period,
    decade_key,
    document_topic_frame,
    filter_documents_by_topic,
    name_topics,
    period_topic_frame,
    rank_topics_by_dominance,
    rank_topics_by_proportion,
    top_terms,
    year_key,
)


PERIOD_KEYS = {
    "decade": decade_key,
    "year": year_key,
}


"""============================================================================
Inference Configuration
============================================================================"""
@dataclass(frozen=True)
class InferenceConfig:
    """
    Options passed to an inference engine.

    iterations: inference iterations (per document for gensim, EM iterations for sklearn)
    seed: random seed, for reproducible fits
    alpha: symmetric Dirichlet document-topic prior, or "auto" to let the engine choose
    verbose_every: report progress every N updates, 0 disables
    passes: sweeps over the corpus (gensim only)
    """
    iterations: int = 500
    seed: int = 1
    alpha: Union[float, str] = "auto"
    verbose_every: int = 0
    passes: int = 1

    def __post_init__(self):
        for name in ("iterations", "passes"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.verbose_every, bool) or not isinstance(self.verbose_every, numbers.Integral) \
                or self.verbose_every < 0:
            raise ValueError(f"verbose_every must be a non-negative integer, got {self.verbose_every!r}")
        if isinstance(self.seed, bool) or not isinstance(self.seed, numbers.Integral):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if self.alpha != "auto":
            if isinstance(self.alpha, bool) or not isinstance(self.alpha, numbers.Real) or not self.alpha > 0:
                raise ValueError(f"alpha must be a positive number or 'auto', got {self.alpha!r}")

    @classmethod
    def from_dict(cls, values: Optional[Mapping[str, Any]]) -> 'InferenceConfig':
        """Build from a mapping; accepts verboseEvery as an alias of verbose_every"""
        values = dict(values or {})
        if "verboseEvery" in values:
            values["verbose_every"] = values.pop("verboseEvery")
        unknown = set(values) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown inference options: {sorted(unknown)}")
        alpha = values.get("alpha")
        if isinstance(alpha, str) and alpha != "auto":
            try:
                values["alpha"] = float(alpha)
            except ValueError:
                raise ValueError(f"alpha must be a positive number or 'auto', got {alpha!r}") from None
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


"""============================================================================
Abstract Base Class for Inference Engines
============================================================================"""
class TopicInferenceEngine(ABC):
    """
    Capability interface for LDA inference.

    An engine receives the document-term matrix, the number of topics and the
    inference options, and returns (theta, beta): the D x K document-topic and
    K x V topic-term distributions. Any conforming engine can be swapped in.
    """

    @abstractmethod
    def infer(self, dtm: DocumentTermMatrix, n_topics: int,
              config: InferenceConfig) -> Tuple[np.ndarray, np.ndarray]:
        """
        Fit the model and return its two distributions.

        Args:
            dtm: Document-term matrix
            n_topics: Number of topics K
            config: Inference options

        Returns:
            (theta, beta) of shapes (D, K) and (K, V)
        """
        pass

    @abstractmethod
    def get_method_name(self) -> str:
        pass


"""============================================================================
Concrete Inference Engines
============================================================================"""
class GensimLdaEngine(TopicInferenceEngine):
    """
    LDA through gensim's LdaModel (online variational Bayes).

    alpha="auto" learns an asymmetric document-topic prior from the corpus.
    Extra keyword arguments (e.g. eta, chunksize) go straight to LdaModel.
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.model = None

    def infer(self, dtm, n_topics, config):
        corpus = dtm.to_bow_corpus()
        self.model = LdaModel(
            corpus=corpus,
            id2word=dtm.id2word(),
            num_topics=n_topics,
            alpha=config.alpha if config.alpha == "auto" else float(config.alpha),
            iterations=config.iterations,
            passes=config.passes,
            random_state=config.seed,
            eval_every=config.verbose_every or None,
            **self.kwargs
        )

        # Variational posterior over topics per document, normalized to theta
        gamma, _ = self.model.inference(corpus)
        theta = normalize_rows(gamma)
        beta = normalize_rows(self.model.get_topics())
        return theta, beta

    def get_method_name(self) -> str:
        return "gensim"


class SklearnLdaEngine(TopicInferenceEngine):
    """
    LDA through scikit-learn's LatentDirichletAllocation (batch variational Bayes).

    alpha="auto" keeps the library default prior of 1/K.
    Extra keyword arguments go straight to LatentDirichletAllocation.
    """

    def __init__(self, **kwargs):
        self.kwargs = {"learning_method": "batch", **kwargs}
        self.model = None

    def infer(self, dtm, n_topics, config):
        self.model = LatentDirichletAllocation(
            n_components=n_topics,
            doc_topic_prior=None if config.alpha == "auto" else float(config.alpha),
            max_iter=config.iterations,
            random_state=config.seed,
            evaluate_every=config.verbose_every or -1,
            verbose=1 if config.verbose_every else 0,
            **self.kwargs
        )
        theta = normalize_rows(self.model.fit_transform(dtm.counts))
        beta = normalize_rows(self.model.components_)
        return theta, beta

    def get_method_name(self) -> str:
        return "sklearn"


"""============================================================================
Factory and Adapter
============================================================================"""
_ENGINES = {
    "gensim": GensimLdaEngine,
    "vem": GensimLdaEngine,
    "sklearn": SklearnLdaEngine,
}


def create_inference_engine(method: str = "gensim", **kwargs) -> TopicInferenceEngine:
    """
    Factory function to create inference engine instances.

    Args:
        method: Engine identifier ('gensim' or its alias 'vem', 'sklearn')
        **kwargs: Engine-specific parameters

    Returns:
        TopicInferenceEngine instance
    """
    engine_cls = _ENGINES.get(str(method).lower())
    if engine_cls is None:
        raise ValueError(f"Unknown inference method: {method}. Use one of {sorted(_ENGINES)}")
    return engine_cls(**kwargs)


@dataclass(frozen=True, eq=False)
class TopicModelResult:
    """Output of one inference run. theta and beta are read-only."""
    theta: np.ndarray
    beta: np.ndarray
    vocabulary: Tuple[str, ...]
    doc_ids: Tuple[str, ...]
    method: str
    config: InferenceConfig

    @property
    def n_topics(self) -> int:
        return self.beta.shape[0]

    @property
    def n_documents(self) -> int:
        return self.theta.shape[0]


def validate_topic_count(n_topics, n_documents: int) -> int:
    if isinstance(n_topics, bool) or not isinstance(n_topics, numbers.Integral):
        raise InvalidTopicCountError(f"Number of topics must be an integer, got {n_topics!r}")
    if not 1 <= n_topics <= n_documents:
        raise InvalidTopicCountError(
            f"Number of topics must be in [1, {n_documents}] for {n_documents} documents, got {n_topics}"
        )
    return int(n_topics)


def check_inference_output(theta, beta, n_documents: int, n_topics: int, n_terms: int,
                           atol: float = 1e-6) -> Tuple[np.ndarray, np.ndarray]:
    """
    Verify engine output against the (D x K, K x V) row-stochastic contract.

    Returns:
        Read-only float64 copies of theta and beta
    """
    checked = []
    for name, matrix, expected_shape in (("theta", theta, (n_documents, n_topics)),
                                         ("beta", beta, (n_topics, n_terms))):
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.shape != expected_shape:
            raise InferenceContractViolationError(
                f"{name} has shape {matrix.shape}, expected {expected_shape}"
            )
        if not is_row_stochastic(matrix, atol=atol):
            raise InferenceContractViolationError(
                f"{name} rows must be non-negative, finite and sum to 1 (tolerance {atol})"
            )
        matrix.setflags(write=False)
        checked.append(matrix)
    return checked[0], checked[1]


def fit_topic_model(dtm: DocumentTermMatrix,
                    n_topics: int,
                    method: str = "gensim",
                    config: Union[InferenceConfig, Mapping[str, Any], None] = None,
                    engine: Optional[TopicInferenceEngine] = None,
                    logger: Optional[logging.Logger] = None) -> TopicModelResult:
    """
    Fit an LDA model on a document-term matrix through an inference engine.

    Args:
        dtm: Document-term matrix
        n_topics: Number of topics, 1 <= K <= number of documents
        method: Engine identifier, used when no engine is given
        config: InferenceConfig or a mapping of its options
        engine: Pre-built engine; overrides method
        logger: Logger for progress messages

    Returns:
        TopicModelResult

    Raises:
        InvalidTopicCountError: K outside [1, D]; no inference is run
        InferenceContractViolationError: engine output has wrong shape or rows not summing to 1
    """
    if not isinstance(config, InferenceConfig):
        config = InferenceConfig.from_dict(config)
    n_topics = validate_topic_count(n_topics, dtm.n_documents)
    engine = engine or create_inference_engine(method)

    log_print(f"Fitting {engine.get_method_name()} LDA with K={n_topics} on "
              f"{dtm.n_documents} documents x {dtm.n_terms} terms "
              f"(iterations={config.iterations}, alpha={config.alpha}, seed={config.seed})",
              level="info", logger=logger)
    theta, beta = engine.infer(dtm, n_topics, config)
    theta, beta = check_inference_output(theta, beta, dtm.n_documents, n_topics, dtm.n_terms)
    log_print("LDA inference completed", level="info", logger=logger)

    return TopicModelResult(
        theta=theta,
        beta=beta,
        vocabulary=dtm.vocabulary,
        doc_ids=dtm.doc_ids,
        method=engine.get_method_name(),
        config=config,
    )


"""============================================================================
Configuration Files
============================================================================"""
def get_default_config_path() -> Path:
    return Path(__file__).parent / 'config.yaml'


def load_config(config_path=None) -> dict:
    """Load a YAML configuration file (the packaged defaults if no path is given)."""
    config_path = Path(config_path) if config_path else get_default_config_path()
    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def merge_config(base: Mapping, overrides: Mapping) -> dict:
    """Recursively merge overrides into a copy of base"""
    merged = copy.deepcopy(dict(base))
    for key, value in (overrides or {}).items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


"""============================================================================
class SpeechTopicsOrchestrator

Primary user interface for speechtopics
============================================================================"""
class SpeechTopicsOrchestrator:
    """
    Runs the topic modeling pipeline over a speech corpus and exposes the
    derived views.

    High-level functionality includes:
    1. Loading a delimited corpus file (doc_id, text, date).
    2. Text preprocessing with stopword and lemma resource files.
    3. Document-term matrix construction with vocabulary pruning; metadata
       rows are dropped in lockstep with empty documents.
    4. LDA inference through a pluggable engine.
    5. Topic names, topic rankings, topic-threshold document filtering and
       per-period topic proportions, recomputed from the current model on
       every call.

    Example Usage:
        orchestrator = SpeechTopicsOrchestrator()
        orchestrator.load_data("sotu.csv", delimiter=";")
        orchestrator.preprocess_text(stopwords_path="stopwords_en.txt",
                                     lemma_path="baseform_en.tsv")
        orchestrator.build_document_term_matrix(min_doc_proportion=0.01)
        orchestrator.fit_topic_model(n_topics=20)
        names = orchestrator.get_topic_names()
        ranking = orchestrator.rank_topics(by="dominance")
        by_decade = orchestrator.aggregate_by_period()
    """
    def __init__(self,
                 config: Optional[dict] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            config: Partial configuration merged over the packaged config.yaml
            logger: Custom logger, creates default if None
        """
        self.logger = logger or self._setup_logger()
        self.config = merge_config(self._get_default_config(), config or {})

        self.documents_df = None
        self.text_preprocessor = None
        self.dtm = None
        self.model_result = None

        self.experiment_params = {'steps': {}}
        self.logger.info("SpeechTopicsOrchestrator initialized")

    # ============================================================================
    # Pipeline Steps
    # ============================================================================
    def load_data(self,
                  input_path,
                  delimiter: Optional[str] = None,
                  data_filters: Optional[Dict[str, Any]] = None,
                  data_loader: Optional[DataLoader] = None) -> 'SpeechTopicsOrchestrator':
        """
        Load the corpus. Resets any preprocessing, matrix and model state.

        Args:
            input_path: Delimited text file(s) with doc_id, text and date columns
            delimiter: Field delimiter (overrides config; inferred from extension if unset)
            data_filters: Optional loader filters, e.g. {'date_range': {'start': '1900-01-01'}}
            data_loader: Pre-configured DataLoader; overrides the other arguments
        """
        corpus_config = self.config['corpus']
        if data_loader is None:
            data_loader = DelimitedTextDataLoader(
                input_path,
                delimiter=delimiter or corpus_config.get('delimiter'),
                encoding=corpus_config.get('encoding', 'utf-8'),
                input_schema_map=corpus_config.get('input_schema_map') or None,
                data_filters=data_filters,
            )
        self.documents_df = data_loader.run()
        self.text_preprocessor = None
        self.dtm = None
        self.model_result = None

        self._track_step_params('load_data', {'input_path': str(input_path), 'delimiter': delimiter})
        self.logger.info(f"Loaded {len(self.documents_df)} documents")
        return self

    def preprocess_text(self,
                        stopwords_path=None,
                        lemma_path=None,
                        text_preprocessor: Optional[TextPreprocessor] = None,
                        **overrides) -> 'SpeechTopicsOrchestrator':
        """
        Tokenize the corpus into the preprocessed_text column.

        Args:
            stopwords_path: Stopword list file, one word per line
            lemma_path: Lemma mapping file of inflected form -> lemma pairs
            text_preprocessor: Pre-configured TextPreprocessor; overrides the other arguments
            **overrides: PreprocessConfig fields overriding the config
        """
        self._require(self.documents_df, "Data not loaded. Call load_data() first.")

        if text_preprocessor is None:
            settings = {**self.config['preprocessing'], **overrides}
            text_preprocessor = TextPreprocessor.from_files(
                stopwords_path=stopwords_path,
                lemma_path=lemma_path,
                config=PreprocessConfig.from_dict(settings),
                encoding=self.config['corpus'].get('encoding', 'utf-8'),
            )
        self.text_preprocessor = text_preprocessor

        self.documents_df[CorpusSchema.PREPROCESSED_TEXT.colname] = text_preprocessor.update_dataframe(
            self.documents_df, CorpusSchema.TEXT.colname
        )
        self.dtm = None
        self.model_result = None

        self._track_step_params('preprocess_text', {
            'stopwords_path': str(stopwords_path) if stopwords_path else None,
            'lemma_path': str(lemma_path) if lemma_path else None,
            **text_preprocessor.get_stats_log(),
        })
        return self

    def build_document_term_matrix(self,
                                   min_doc_proportion: Optional[float] = None,
                                   excluded_terms: Optional[Sequence[str]] = None) -> 'SpeechTopicsOrchestrator':
        """
        Build the document-term matrix from the preprocessed text. Documents left
        empty are dropped from documents_df as well, keeping rows aligned.
        """
        self._require(self.documents_df, "Data not loaded. Call load_data() first.")
        self._require(self.text_preprocessor, "Text not preprocessed. Call preprocess_text() first.")
        token_col = CorpusSchema.PREPROCESSED_TEXT.colname

        dtm_config = self.config['dtm']
        if min_doc_proportion is None:
            min_doc_proportion = dtm_config['min_doc_proportion']
        if excluded_terms is None:
            excluded_terms = dtm_config.get('excluded_terms') or []

        self.dtm = build_document_term_matrix(
            self.documents_df[token_col].tolist(),
            doc_ids=self.documents_df[CorpusSchema.DOC_ID.colname].tolist(),
            min_doc_proportion=min_doc_proportion,
            excluded_terms=excluded_terms,
        )
        dropped = len(self.documents_df) - self.dtm.n_documents
        self.documents_df = self.dtm.align(self.documents_df)
        self.model_result = None

        self._track_step_params('build_document_term_matrix', {
            'min_doc_proportion': min_doc_proportion,
            'excluded_terms': list(excluded_terms),
            'n_documents': self.dtm.n_documents,
            'n_terms': self.dtm.n_terms,
            'dropped_documents': dropped,
        })
        self.logger.info(f"Document-term matrix: {self.dtm.n_documents} documents x {self.dtm.n_terms} terms "
                         f"({dropped} empty documents dropped)")
        return self

    def fit_topic_model(self,
                        n_topics: Optional[int] = None,
                        method: Optional[str] = None,
                        engine: Optional[TopicInferenceEngine] = None,
                        **overrides) -> 'SpeechTopicsOrchestrator':
        """
        Fit LDA on the current document-term matrix. Replaces any previous model;
        names, rankings and aggregates are always derived from the latest one.

        Args:
            n_topics: Number of topics (overrides config)
            method: Inference engine identifier (overrides config)
            engine: Pre-built engine; overrides method
            **overrides: InferenceConfig options (iterations, seed, alpha, verbose_every, passes)
        """
        self._require(self.dtm, "Document-term matrix not built. Call build_document_term_matrix() first.")

        model_config = dict(self.config['topic_model'])
        n_topics = n_topics if n_topics is not None else model_config.pop('n_topics')
        method = method or model_config.pop('method', 'gensim')
        model_config.pop('n_topics', None)
        model_config.pop('method', None)
        inference_config = InferenceConfig.from_dict({**model_config, **overrides})

        self.model_result = None
        self.model_result = fit_topic_model(
            self.dtm, n_topics, method=method, config=inference_config, engine=engine, logger=self.logger
        )
        self._track_step_params('fit_topic_model', {
            'n_topics': self.model_result.n_topics,
            'method': self.model_result.method,
            **inference_config.to_dict(),
        })
        return self

    # ============================================================================
    # Derived Views
    # ============================================================================
    def get_topic_names(self,
                        mode: Optional[Union[str, TopicNamingMode]] = None,
                        n_terms: Optional[int] = None,
                        separator: Optional[str] = None,
                        scorer: Optional[Callable[[np.ndarray], np.ndarray]] = None) -> Dict[int, str]:
        """Topic labels (1..K) from the top terms of the current model"""
        result = self._require_model()
        naming = self.config['naming']
        return name_topics(
            result.beta,
            result.vocabulary,
            n_terms=naming['n_terms'] if n_terms is None else n_terms,
            mode=mode or naming['mode'],
            separator=naming['separator'] if separator is None else separator,
            scorer=scorer,
        )

    def get_top_terms(self, n_terms: int = 10,
                      mode: Optional[Union[str, TopicNamingMode]] = None) -> pd.DataFrame:
        """Top terms per topic as a (rank x topic) dataframe"""
        result = self._require_model()
        terms = top_terms(result.beta, result.vocabulary, n_terms=n_terms, mode=mode or self.config['naming']['mode'])
        return pd.DataFrame({f"Topic {k}": pd.Series(words) for k, words in terms.items()})

    def rank_topics(self, by: str = "proportion",
                    topic_names: Optional[Mapping[int, str]] = None) -> List[Tuple[str, float]]:
        """
        Rank topics by mean proportion ('proportion') or by Rank-1 document
        count ('dominance').
        """
        result = self._require_model()
        topic_names = topic_names or self.get_topic_names()
        if by == "proportion":
            return rank_topics_by_proportion(result.theta, topic_names)
        if by == "dominance":
            return rank_topics_by_dominance(result.theta, topic_names)
        raise ValueError(f"Unknown ranking: {by}. Use 'proportion' or 'dominance'")

    def filter_documents(self, topic_index: int, threshold: float) -> pd.DataFrame:
        """Documents whose share of a topic is at least threshold, with that share as a column"""
        result = self._require_model()
        rows = filter_documents_by_topic(result.theta, topic_index, threshold)
        filtered = self.documents_df.iloc[rows].copy()
        filtered['topic_share'] = result.theta[rows, topic_index - 1]
        self.logger.info(f"Topic {topic_index} filter at {threshold}: {len(rows)}/{result.n_documents} documents")
        return filtered

    def aggregate_by_period(self,
                            key_func: Optional[Callable[[object], str]] = None,
                            field: Optional[str] = None,
                            topic_names: Optional[Mapping[int, str]] = None) -> pd.DataFrame:
        """Mean topic proportions per period (decade by default) as a (period x topic) dataframe"""
        result = self._require_model()
        temporal = self.config['temporal']
        if key_func is None:
            period = temporal.get('period', 'decade')
            if period not in PERIOD_KEYS:
                raise ValueError(f"Unknown period: {period}. Use one of {sorted(PERIOD_KEYS)}")
            key_func = PERIOD_KEYS[period]
        aggregates = aggregate_by_period(
            result.theta,
            self.documents_df,
            key_func=key_func,
            field=field or temporal.get('field', CorpusSchema.DATE.colname),
        )
        return period_topic_frame(aggregates, topic_names or self.get_topic_names())

    def get_document_topics(self, doc_ids: Optional[Sequence[str]] = None,
                            topic_names: Optional[Mapping[int, str]] = None) -> pd.DataFrame:
        """Topic distributions of the given documents (all if None)"""
        result = self._require_model()
        rows = None
        if doc_ids is not None:
            positions = {doc_id: row for row, doc_id in enumerate(result.doc_ids)}
            unknown = [doc_id for doc_id in doc_ids if str(doc_id) not in positions]
            if unknown:
                raise KeyError(f"Unknown doc_ids: {unknown}")
            rows = [positions[str(doc_id)] for doc_id in doc_ids]
        return document_topic_frame(result.theta, result.doc_ids, topic_names or self.get_topic_names(), rows=rows)

    # ============================================================================
    # Results and Status
    # ============================================================================
    def save_results(self, output_directory=None) -> str:
        """
        Write topic names, both rankings, per-period proportions, theta and beta
        as CSV, the tracked step parameters as JSON and the model result as a
        pickle.

        Returns:
            The output directory
        """
        result = self._require_model()
        if output_directory is None:
            output_directory = os.path.join("experiments", f"speechtopics_{get_date_hour_minute()}")
        os.makedirs(output_directory, exist_ok=True)

        names = self.get_topic_names()
        pd.DataFrame({'topic': list(names), 'name': list(names.values())}).to_csv(
            os.path.join(output_directory, 'topic_names.csv'), index=False)
        for by in ("proportion", "dominance"):
            pd.DataFrame(self.rank_topics(by=by, topic_names=names), columns=['topic', by]).to_csv(
                os.path.join(output_directory, f'ranking_{by}.csv'), index=False)
        self.aggregate_by_period(topic_names=names).to_csv(os.path.join(output_directory, 'topics_by_period.csv'))
        self.get_document_topics(topic_names=names).to_csv(os.path.join(output_directory, 'theta.csv'))
        pd.DataFrame(result.beta, index=[names[k] for k in range(1, result.n_topics + 1)],
                     columns=list(result.vocabulary)).to_csv(os.path.join(output_directory, 'beta.csv'))

        with open(os.path.join(output_directory, 'params.json'), 'w', encoding='utf-8') as f:
            json.dump(self.experiment_params, f, indent=2, default=str)
        write_pickle(os.path.join(output_directory, 'model_result.pkl'), result)

        self.logger.info(f"Saved results to {output_directory}")
        return output_directory

    def get_status(self) -> dict:
        """Get current status of the pipeline."""
        return {
            'data_loaded': self.documents_df is not None,
            'text_preprocessed': self.text_preprocessor is not None,
            'dtm_built': self.dtm is not None,
            'model_fitted': self.model_result is not None,
            'num_documents': len(self.documents_df) if self.documents_df is not None else 0,
            'num_terms': self.dtm.n_terms if self.dtm is not None else 0,
            'num_topics': self.model_result.n_topics if self.model_result is not None else 0,
        }

    # ============================================================================
    # Private Helpers
    # ============================================================================
    @staticmethod
    def _require(value, message: str):
        if value is None:
            raise RuntimeError(message)

    def _require_model(self) -> TopicModelResult:
        self._require(self.model_result, "Model not fitted. Call fit_topic_model() first.")
        return self.model_result

    def _track_step_params(self, step_name: str, params: dict):
        self.experiment_params['steps'][step_name] = params

    def _get_default_config(self) -> dict:
        """Load default configuration from YAML file."""
        try:
            return load_config()
        except FileNotFoundError:
            self.logger.error(f"Config file not found at {get_default_config_path()}")
            raise
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing config file: {e}")
            raise

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger for speechtopics operations."""
        logger = logging.getLogger('SpeechTopics')
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
        return logger
