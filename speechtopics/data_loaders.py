"""
This module implements data loaders that read a speech corpus from disk into a
pandas dataframe following the column schema in dataframe_schema.py
"""
import pandas as pd

from typing import Optional, Dict, Union, List, Any
from pathlib import Path
from abc import ABC, abstractmethod

from .dataframe_schema import CorpusSchema
from .exceptions import MissingMetadataError
from ._file_driver import log_print


"""============================================================================
class DataLoader(ABC)

This class is the base class for data loaders. Data loaders parse source data
into a pandas dataframe with the schema specified by dataframe_schema.py.

Basic Usage:
    1. Create a DataLoader instance, given one or more input paths
    2. Use .run() to load, convert, filter and validate the corpus
    3. .run() returns the clean dataframe (rows with all required fields),
       in corpus order
============================================================================"""
class DataLoader(ABC):
    """
    Base class for corpus loaders; extend it to load other source formats.
    """
    def __init__(self,
                 input_path: Union[str, Path, List[Union[str, Path]]],
                 input_schema_map: Optional[Dict[str, str]] = None,
                 data_filters: Optional[Dict[str, Any]] = None,
                 encoding: str = "utf-8") -> None:
        # Normalize input to list of paths
        if isinstance(input_path, (str, Path)):
            self.input_paths = [Path(input_path)]
        else:
            self.input_paths = [Path(p) for p in input_path]

        self.input_schema_map = input_schema_map or {}
        self.data_filters = data_filters or {}
        self.encoding = encoding

        # To be resolved later
        self.raw_data = []
        self.df = None  # Full dataframe
        self._valid_mask = None  # Boolean Series marking rows with all required fields

    def run(self) -> pd.DataFrame:
        """Main pipeline: load, convert, filter, validate"""
        for path in self.input_paths:
            if not path.is_file():
                raise FileNotFoundError(f"Input file '{path}' not found.")
        self.raw_data = []
        self._load_raw_data()
        self._convert_to_schema()
        self._apply_data_filters()
        self._validate_and_flag()
        return self.get_clean_df()

    def get_clean_df(self) -> pd.DataFrame:
        """Get dataframe with only rows that have complete data, in corpus order"""
        if self._valid_mask is None:
            raise RuntimeError("Validation not run yet.")
        return self.df[self._valid_mask].reset_index(drop=True)

    def get_na_df(self) -> pd.DataFrame:
        """Get dataframe with only rows that are missing data"""
        if self._valid_mask is None:
            raise RuntimeError("Validation not run yet.")
        return self.df[~self._valid_mask].reset_index(drop=True)

    """=====================================================================
    PRIVATE METHODS
    ========================================================================"""

    @abstractmethod
    def _load_raw_data(self):
        """Load data from the raw file(s). Should set self.raw_data to a list of dict entries"""
        pass

    def _apply_field_mapping(self, entry: dict) -> dict:
        """
        Apply input_schema_map to rename source field names to schema field names,
        e.g. {'id': 'doc_id', 'speech': 'text'}
        """
        if not self.input_schema_map:
            return entry

        mapped_entry = entry.copy()
        for source_field, target_field in self.input_schema_map.items():
            if source_field in entry:
                mapped_entry[target_field] = entry[source_field]
                if source_field != target_field:
                    mapped_entry.pop(source_field, None)
        return mapped_entry

    def _convert_to_schema(self):
        """
        Convert raw entries into a dataframe with the schema columns first,
        followed by any extra source columns (e.g. speaker, speech type).

        Note: This is NOT text preprocessing - see text_preprocessing.py
        """
        if self.input_schema_map:
            log_print(f"Using field mapping: {self.input_schema_map}", level="debug")

        if self.raw_data:
            sample_keys = set(self._apply_field_mapping(self.raw_data[0]).keys())
            missing = [col for col in CorpusSchema.required_colnames() if col not in sample_keys]
            if missing:
                raise MissingMetadataError(
                    f"Required corpus fields {missing} not found in source columns "
                    f"{sorted(sample_keys)}. Provide input_schema_map to rename source fields."
                )

        schema_cols = CorpusSchema.all_colnames()
        rows = []
        for entry in self.raw_data:
            mapped_entry = self._apply_field_mapping(entry)
            row = {field.colname: field.get_extractor()(mapped_entry) for field in CorpusSchema}
            for key, value in mapped_entry.items():
                if key not in row:
                    row[key] = value
            rows.append(row)

        self.df = pd.DataFrame(rows)
        if self.df.empty:
            self.df = pd.DataFrame(columns=schema_cols)
        log_print(f"Length of rows after converting to schema: {len(self.df)}", level="info")

    def _apply_data_filters(self):
        """
        Apply data filters in the order they appear in self.data_filters.
        Supported filters: 'date_range' ({'start': ..., 'end': ...}) and
        'custom' ({'function': callable(df) -> boolean mask}).
        """
        if not self.data_filters or self.df is None or self.df.empty:
            return

        original_count = len(self.df)
        for filter_name, filter_config in self.data_filters.items():
            if filter_config is None:
                continue
            if filter_name == 'date_range':
                self.df = self._apply_date_range_filter(filter_config, self.df)
            elif filter_name == 'custom':
                self.df = self._apply_custom_filter(filter_config, self.df)
            else:
                raise ValueError(f"Unknown filter type: {filter_name}")
            log_print(f"After {filter_name} filter: {len(self.df)} rows "
                      f"({original_count - len(self.df)} removed)", level="info")

    def _apply_date_range_filter(self, date_config: Dict[str, str], df: pd.DataFrame) -> pd.DataFrame:
        """Keep rows whose date lies within the inclusive ['start', 'end'] range"""
        dates = pd.to_datetime(df[CorpusSchema.DATE.colname], errors="coerce")
        mask = dates.notna()

        if date_config.get('start'):
            mask &= dates >= pd.to_datetime(date_config['start'])
        if date_config.get('end'):
            mask &= dates <= pd.to_datetime(date_config['end'])

        return df[mask].copy()

    def _apply_custom_filter(self, custom_config: Dict, df: pd.DataFrame) -> pd.DataFrame:
        """Apply a callable filter returning a boolean mask over the dataframe"""
        filter_func = custom_config.get('function') if isinstance(custom_config, dict) else None
        if not callable(filter_func):
            raise ValueError("Custom filter requires a 'function' key with a callable")
        return df[filter_func(df)].copy()

    def _validate_and_flag(self):
        """
        Flags valid rows in self.df: every required field present and a string,
        and doc_id not already used by an earlier row.
        """
        if self.df is None:
            raise ValueError("self.df has not been populated.")

        required_cols = CorpusSchema.required_colnames()
        valid = self.df[required_cols].notna().all(axis=1)
        for col in required_cols:
            valid &= self.df[col].map(lambda x: isinstance(x, str))

        duplicated = self.df[CorpusSchema.DOC_ID.colname].duplicated(keep="first") & valid
        if duplicated.any():
            dup_ids = self.df.loc[duplicated, CorpusSchema.DOC_ID.colname].tolist()
            log_print(f"Dropping {len(dup_ids)} rows with duplicate doc_id: {dup_ids[:5]}", level="warning")
        self._valid_mask = (valid & ~duplicated).astype(bool)

        n_total = len(self.df)
        n_valid = int(self._valid_mask.sum())
        log_print(f"Validation complete: {n_valid}/{n_total} rows valid, {n_total - n_valid} invalid.", level="info")


"""============================================================================
class DelimitedTextDataLoader(DataLoader)

Loads a corpus from delimited text files (CSV/TSV or any single-character
delimiter, e.g. ';'). Each file needs at least doc_id, text and date columns,
possibly under other names mapped via input_schema_map.
============================================================================"""
class DelimitedTextDataLoader(DataLoader):
    DEFAULT_DELIMITERS = {".csv": ",", ".tsv": "\t", ".tab": "\t"}

    def __init__(self, input_path, delimiter: Optional[str] = None, **kwargs):
        super().__init__(input_path, **kwargs)
        self.delimiter = delimiter

    def _delimiter_for(self, path: Path) -> str:
        if self.delimiter:
            return self.delimiter
        suffix = path.suffix.lower()
        if suffix not in self.DEFAULT_DELIMITERS:
            raise ValueError(f"Cannot infer delimiter for '{path.name}'; pass delimiter explicitly")
        return self.DEFAULT_DELIMITERS[suffix]

    def _load_raw_data(self):
        """
        Reads every input file as strings (no NA inference) and concatenates
        the entries in file order.
        """
        for input_path in self.input_paths:
            file_df = pd.read_csv(
                input_path,
                sep=self._delimiter_for(input_path),
                encoding=self.encoding,
                dtype=str,
                keep_default_na=False,
            )
            entries = file_df.to_dict("records")
            self.raw_data.extend(entries)
            log_print(f"Loaded {len(entries)} entries from {input_path}", level="info")

        log_print(f"Total loaded: {len(self.raw_data)} entries from {len(self.input_paths)} file(s)", level="info")


def load_corpus(input_path, delimiter: Optional[str] = None, **kwargs) -> pd.DataFrame:
    """Load a delimited corpus file and return the clean dataframe"""
    return DelimitedTextDataLoader(input_path, delimiter=delimiter, **kwargs).run()
