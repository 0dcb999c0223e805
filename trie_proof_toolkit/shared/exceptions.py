"""
Exception hierarchy for the trie proof toolkit.

Exception Categories:
- RetryableException: Transient failures that may succeed on retry (RPC, network)
- NonRetryableException: Permanent failures that won't benefit from retry (bad data)
- ConfigurationException: Startup/config errors that prevent operation

Structural failures of the trie core are all NonRetryableException:
- RlpDecodingError: an RLP header or list violates the fixed-shape limits
- HexPrefixError: a trie path segment has invalid hex-prefix flag bits
- ProofLayoutError: a padded proof does not match its declared dimensions

A proof that is well formed but does not match its root is NOT an
exception; the verifier answers False for it.
"""


class RetryableException(Exception):
    """
    Base class for exceptions that may succeed on retry.

    Use for transient failures like:
    - RPC timeouts
    - Rate limiting
    - Temporary network issues
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonRetryableException(Exception):
    """
    Base class for exceptions that won't benefit from retry.

    Use for permanent failures like:
    - Invalid input data
    - Malformed encodings
    - Proofs exceeding their fixed dimensions
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationException(NonRetryableException):
    """
    Exception for configuration/startup errors.

    Use when:
    - Required environment variables are missing
    - Invalid configuration values
    """

    pass


class TrieProofFetchException(RetryableException):
    """
    Exception for proof fetching failures.

    Inherits from RetryableException because eth_getProof failures
    are usually RPC issues that may resolve on retry.
    """

    pass


class TrieProofStructureError(NonRetryableException):
    """
    Base class for hard failures of the decoding/verification core.

    The input violates the fixed-shape contract the caller had to uphold,
    so no verification result exists for it.
    """

    pass


class RlpDecodingError(TrieProofStructureError):
    """Malformed RLP, or RLP exceeding the supported length/capacity."""

    pass


class HexPrefixError(TrieProofStructureError):
    """Trie path segment with invalid hex-prefix encoding."""

    pass


class ProofLayoutError(TrieProofStructureError):
    """Padded proof, key or value not matching the expected dimensions."""

    pass
