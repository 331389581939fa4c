"""Custom exception hierarchy for the evidence gate."""


class EvidenceGateError(Exception):
    """Base exception for all evidence gate errors."""


class DraftTooLargeError(EvidenceGateError):
    """Draft exceeds the configured maximum size."""


class ExtractionFailedError(EvidenceGateError):
    """Claim extraction failed after all retries."""


class CorpusUnavailableError(EvidenceGateError):
    """The corpus index could not be reached or is not loaded."""


class VerificationCancelledError(EvidenceGateError):
    """The verification run was cancelled by the caller."""


class ScoringPolicyError(EvidenceGateError):
    """The scoring threshold table is inconsistent."""


class GenerationError(EvidenceGateError):
    """Error calling the LLM provider."""


class EmbeddingError(EvidenceGateError):
    """Error generating embeddings."""


class ConfigurationError(EvidenceGateError):
    """Error in system configuration."""
