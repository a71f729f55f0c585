"""
Error types raised by the speechtopics pipeline.

All errors are local validation failures: they are raised immediately by the
step that detects them and are never retried.
"""


class SpeechTopicsError(Exception):
    """Base class for all speechtopics errors"""


class DegenerateVocabularyError(SpeechTopicsError, ValueError):
    """Vocabulary pruning removed every term of the document-term matrix"""


class InvalidTopicCountError(SpeechTopicsError, ValueError):
    """Number of topics is not in [1, number of documents]"""


class InferenceContractViolationError(SpeechTopicsError, RuntimeError):
    """Inference engine output has the wrong shape or is not row-stochastic"""


class InvalidTopicIndexError(SpeechTopicsError, ValueError):
    """Topic index outside [1, K]"""


class InvalidThresholdError(SpeechTopicsError, ValueError):
    """Probability threshold outside [0, 1]"""


class MissingMetadataError(SpeechTopicsError, KeyError):
    """A required per-document metadata field is absent"""

    def __str__(self):
        return str(self.args[0]) if self.args else ""
