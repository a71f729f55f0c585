# speechtopics/__init__.py
import importlib
from types import ModuleType

__version__ = "1.0.0"

__all__ = [
    "core",
    "cli",
    "data_loaders",
    "dataframe_schema",
    "document_term_matrix",
    "exceptions",
    "text_preprocessing",
    "visualization",
    "__version__",
]

# Map attribute -> submodule for lazy loading
_lazy_submodules = {
    "core": "speechtopics.core",
    "cli": "speechtopics.cli",
    "data_loaders": "speechtopics.data_loaders",
    "dataframe_schema": "speechtopics.dataframe_schema",
    "document_term_matrix": "speechtopics.document_term_matrix",
    "exceptions": "speechtopics.exceptions",
    "text_preprocessing": "speechtopics.text_preprocessing",
    "visualization": "speechtopics.visualization",
}

def __getattr__(name: str) -> ModuleType:
    if name in _lazy_submodules:
        module = importlib.import_module(_lazy_submodules[name])
        globals()[name] = module  # cache for future
        return module
    raise AttributeError(f"module 'speechtopics' has no attribute '{name}'")

def __dir__():
    return sorted(list(globals().keys()) + list(_lazy_submodules.keys()))
