"""
File I/O and logging helpers for speechtopics.

This module contains readers for the auxiliary text resources (stopword lists,
lemma mappings), pickle helpers and the log_print logging helper.
"""

import os
import pickle
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Set, Union


PathLike = Union[str, Path]


# ============================================================================
# Logging
# ============================================================================

def log_print(message: str, level: str = "info", logger: logging.Logger = None, also_print: bool = False):
    """
    Logs and optionally prints a message.

    Parameters:
        message (str): The message to log/print.
        level (str): Logging level: 'debug', 'info', 'warning', 'error', or 'critical'.
        logger (logging.Logger): Logger instance. If None, uses the package logger.
        also_print (bool): Whether to also print to stdout.
    """
    if logger is None:
        logger = logging.getLogger("SpeechTopics")

    log_func = getattr(logger, level.lower(), logger.info)
    log_func(message)

    if also_print:
        print(message)


# ============================================================================
# Auxiliary Resource Files
# ============================================================================

def _iter_content_lines(file_path: PathLike, encoding: str = "utf-8"):
    """Yield stripped, non-empty lines that are not '#' comments"""
    with open(file_path, "r", encoding=encoding) as f:
        for line in f:
            line = line.lstrip("\ufeff").strip()
            if not line or line.startswith("#"):
                continue
            yield line


def load_stopwords(file_path: PathLike, encoding: str = "utf-8") -> Set[str]:
    """Read a stopword list with one word per line. Words are lowercased."""
    stopwords = {line.lower() for line in _iter_content_lines(file_path, encoding)}
    log_print(f"Loaded {len(stopwords)} stopwords from {file_path}", level="debug")
    return stopwords


def load_lemma_map(file_path: PathLike, encoding: str = "utf-8") -> Dict[str, str]:
    """
    Read a lemma mapping file of inflected-form -> lemma pairs.

    Each line holds two fields separated by a tab (or, if there is no tab, a
    comma): the inflected form first, the lemma second. An optional header line
    whose first field is 'inflected_form' is skipped. When a form appears twice
    the first mapping wins.

    Args:
        file_path: Path to the mapping file
        encoding: File encoding

    Returns:
        Dict mapping lowercased inflected forms to lowercased lemmas
    """
    lemma_map = {}
    for line_no, line in enumerate(_iter_content_lines(file_path, encoding), start=1):
        sep = "\t" if "\t" in line else ","
        fields = [field.strip().strip('"') for field in line.split(sep)]
        if len(fields) < 2 or not fields[0] or not fields[1]:
            raise ValueError(f"Malformed lemma mapping on line {line_no} of {file_path}: {line!r}")
        form, lemma = fields[0].lower(), fields[1].lower()
        if line_no == 1 and form == "inflected_form":
            continue
        lemma_map.setdefault(form, lemma)
    log_print(f"Loaded {len(lemma_map)} lemma mappings from {file_path}", level="debug")
    return lemma_map


# ============================================================================
# File I/O Operations
# ============================================================================

def write_pickle(file_path, data, overwrite=True):
    """Write data to a pickle file"""
    if not overwrite and os.path.exists(file_path):
        log_print(f"File '{file_path}' already exists. Skipping write as overwrite=False.", level="warning")
        return

    os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
    with open(file_path, 'wb') as f:
        pickle.dump(data, f)
    log_print(f"Data successfully written to '{file_path}'.")


def read_pickle(file_path):
    """Read data from a pickle file"""
    with open(file_path, 'rb') as f:
        return pickle.load(f)


# ============================================================================
# Time and Naming Utilities
# ============================================================================

def get_date_hour_minute():
    """Function to generate a 6 digit _ 4 digit timestr of [month|day|year]_[hour|minute]"""
    today = datetime.now()
    timestr = today.strftime("%m%d%Y_%H%M")
    return timestr
