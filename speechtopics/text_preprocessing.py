"""
Text preprocessing utilities for speechtopics.

Turns raw speech texts into token lists ready for the document-term matrix:
tokenization, lowercasing, lemmatization, stopword removal and optional
collocation compounding (e.g. 'united states' -> 'united_states').
"""

import nltk
import pandas as pd
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
from gensim.utils import simple_preprocess
from gensim.models.phrases import Phrases
from nltk.corpus import stopwords as nltk_stopwords
from nltk.stem import WordNetLemmatizer

from ._file_driver import log_print, load_lemma_map, load_stopwords


def ensure_nltk_resource(resource_path: str, package: str) -> None:
    """Download an nltk resource (e.g. 'corpora/stopwords') if it is missing"""
    try:
        nltk.data.find(resource_path)
    except LookupError:
        log_print(f"Downloading missing nltk resource '{package}'", level="info")
        nltk.download(package, quiet=True)


def tokenize(text, min_len: int = 2, max_len: int = 40, deacc: bool = False) -> List[str]:
    """Lowercase and split text into alphabetic tokens; drops numbers, punctuation and symbols"""
    if text is None:
        return []
    return simple_preprocess(str(text), deacc=deacc, min_len=min_len, max_len=max_len)


def lemmatize_with_map(tokens: List[str], lemma_map: Dict[str, str]) -> List[str]:
    return [lemma_map.get(token, token) for token in tokens]


def filter_stopwords(tokens: List[str], stopword_set) -> List[str]:
    return [token for token in tokens if token not in stopword_set]


@dataclass
class PreprocessConfig:
    """
    Preprocessing configuration. Mirrors the 'preprocessing' section of config.yaml.
    """
    min_token_len: int = 2
    max_token_len: int = 40
    deacc: bool = False

    # Lemmatization uses the lemma mapping when one is given, WordNet otherwise
    lemmatize: bool = True

    # nltk stopword list to add to file-provided stopwords, e.g. 'english'
    stopword_lang: Optional[str] = None

    # Collocations
    detect_collocations: bool = True
    collocation_min_count: int = 25
    collocation_threshold: float = 10.0
    collocation_delimiter: str = "_"

    @classmethod
    def from_dict(cls, values: Optional[dict]) -> 'PreprocessConfig':
        values = dict(values or {})
        unknown = set(values) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown preprocessing options: {sorted(unknown)}")
        return cls(**values)


class TextPreprocessor:
    def __init__(self,
                 config: Optional[PreprocessConfig] = None,
                 stopwords: Optional[Iterable[str]] = None,
                 lemma_map: Optional[Dict[str, str]] = None):
        self.config = config or PreprocessConfig()
        self.stopwords = {word.lower() for word in stopwords} if stopwords else set()
        if self.config.stopword_lang:
            ensure_nltk_resource("corpora/stopwords", "stopwords")
            self.stopwords.update(nltk_stopwords.words(self.config.stopword_lang))

        self.lemma_map = dict(lemma_map) if lemma_map else None
        self.lemmatizer = None
        if self.config.lemmatize and self.lemma_map is None:
            ensure_nltk_resource("corpora/wordnet", "wordnet")
            ensure_nltk_resource("corpora/omw-1.4", "omw-1.4")
            self.lemmatizer = WordNetLemmatizer()

        self.phrases = None
        self.stats_log = {}

    @classmethod
    def from_files(cls,
                   stopwords_path=None,
                   lemma_path=None,
                   config: Optional[PreprocessConfig] = None,
                   encoding: str = "utf-8") -> 'TextPreprocessor':
        """Build a preprocessor from a stopword list file and/or a lemma mapping file"""
        stopwords = load_stopwords(stopwords_path, encoding) if stopwords_path else None
        lemma_map = load_lemma_map(lemma_path, encoding) if lemma_path else None
        return cls(config=config, stopwords=stopwords, lemma_map=lemma_map)

    ### === Per-document steps === ###
    def tokenize(self, text) -> List[str]:
        return tokenize(text,
                        min_len=self.config.min_token_len,
                        max_len=self.config.max_token_len,
                        deacc=self.config.deacc)

    def lemmatize_tokens(self, tokens: List[str]) -> List[str]:
        if not self.config.lemmatize:
            return list(tokens)
        if self.lemma_map is not None:
            return lemmatize_with_map(tokens, self.lemma_map)
        return [self.lemmatizer.lemmatize(token) for token in tokens]

    def remove_stopwords(self, tokens: List[str]) -> List[str]:
        return filter_stopwords(tokens, self.stopwords)

    def preprocess_text(self, text) -> List[str]:
        """Tokenize, lemmatize and drop stopwords for one document (no collocations)"""
        return self.remove_stopwords(self.lemmatize_tokens(self.tokenize(text)))

    ### === Corpus-level steps === ###
    def fit_collocations(self, docs: List[List[str]]) -> None:
        """Learn frequent bigram collocations over the whole corpus"""
        self.phrases = Phrases(
            docs,
            min_count=self.config.collocation_min_count,
            threshold=self.config.collocation_threshold,
            delimiter=self.config.collocation_delimiter,
        ).freeze()
        self.stats_log['collocations'] = len(self.phrases.phrasegrams)

    def compound_collocations(self, docs: List[List[str]]) -> List[List[str]]:
        if self.phrases is None:
            raise RuntimeError("Collocations not fitted. Call fit_collocations() first.")
        return [list(self.phrases[doc]) for doc in docs]

    def preprocess_many(self, texts: Iterable) -> List[List[str]]:
        """
        Preprocess a corpus. Documents keep their position; a document that
        loses all its tokens becomes an empty list (the DTM builder drops it).
        """
        docs = [self.preprocess_text(text) for text in texts]
        self.stats_log['documents'] = len(docs)
        self.stats_log['tokens'] = sum(len(doc) for doc in docs)

        if self.config.detect_collocations:
            self.fit_collocations(docs)
            docs = self.compound_collocations(docs)
            log_print(f"Compounded {self.stats_log['collocations']} collocations", level="info")

        return docs

    ### === PIPELINE WRAPPER METHOD === ###
    def update_dataframe(self, df: pd.DataFrame, text_column: str = 'text') -> pd.Series:
        """
        Preprocess one text column of a dataframe.

        Returns:
            Series of token lists with the dataframe's index
        """
        if text_column not in df.columns:
            raise ValueError(f"Column '{text_column}' not found in dataframe")

        log_print(f"Preprocessing {len(df)} documents from column '{text_column}'", level="info")
        docs = self.preprocess_many(df[text_column].tolist())
        log_print(f"Text preprocessing completed: {self.stats_log['tokens']} tokens kept", level="info")
        return pd.Series(docs, index=df.index, dtype=object)

    def get_stats_log(self):
        return self.stats_log
