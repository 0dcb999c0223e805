from typing import Optional, Union

from trie_proof_toolkit.core.verifier import verify_trie_proof
from trie_proof_toolkit.proofs.generators.state_proof import fetch_state_proof
from trie_proof_toolkit.proofs.generators.storage_proof import (
    fetch_storage_proof,
)
from trie_proof_toolkit.proofs.preprocess import check_padding
from trie_proof_toolkit.proofs.types import ProofBundle
from trie_proof_toolkit.shared.constants import GlobalConstants
from trie_proof_toolkit.shared.exceptions import TrieProofStructureError
from trie_proof_toolkit.shared.logging import get_logger
from trie_proof_toolkit.shared.results import (
    ErrorSeverity,
    ProcessingError,
    Result,
)
from trie_proof_toolkit.shared.retry import RPC_RETRY_CONFIG
from trie_proof_toolkit.shared.services.web3_service import Web3Service

_logger = get_logger(__name__)


class TrieProofManager:
    """Fetches trie proofs from an Ethereum node and verifies them"""

    def __init__(
        self,
        chain_id: int = GlobalConstants.MAINNET_CHAIN_ID,
        rpc_url: Optional[str] = None,
    ):
        rpc_url = rpc_url or GlobalConstants.get_rpc_url(chain_id)

        self.chain_id = chain_id
        self.web3_service = Web3Service(chain_id, rpc_url)

    def resolve_block_number(self, block_number: Optional[int]) -> int:
        """Return `block_number`, or the latest block number if None."""
        if block_number is not None:
            return block_number
        return RPC_RETRY_CONFIG.run(
            self.web3_service.get_latest_block_number,
            operation_name="latest_block_number",
        )

    def get_storage_proof(
        self,
        address: str,
        key: Union[int, str, bytes],
        max_depth: int,
        block_number: Optional[int] = None,
        max_retries: int = 3,
    ) -> Result[ProofBundle]:
        """
        Fetch and preprocess a storage proof.

        Args:
            address: The account address
            key: The storage slot
            max_depth: Maximum admissible proof depth
            block_number: The block number (latest if None)
            max_retries: Number of retries for RPC calls

        Returns:
            Result[ProofBundle]: Success with the storage root and padded
            proof, or failure with error
        """
        context = {
            "address": address,
            "key": str(key),
            "block": block_number,
            "max_depth": max_depth,
        }

        try:
            block_number = self.resolve_block_number(block_number)
            context["block"] = block_number

            def _fetch():
                return fetch_storage_proof(
                    self.web3_service,
                    block_number,
                    address,
                    key,
                    max_depth,
                )

            bundle = RPC_RETRY_CONFIG.with_attempts(max_retries).run(
                _fetch, operation_name=f"storage_proof_{address[:10]}"
            )
            _logger.info(
                f"Fetched storage proof of depth {bundle['proof'].depth} "
                f"for {address} at block {block_number}"
            )
            return Result.ok(bundle)
        except Exception as e:
            return Result.fail(
                ProcessingError(
                    source="storage_proof",
                    message=f"Error fetching storage proof: {str(e)}",
                    severity=ErrorSeverity.ERROR,
                    context=context,
                    exception=e,
                )
            )

    def get_state_proof(
        self,
        address: str,
        max_depth: int,
        block_number: Optional[int] = None,
        max_retries: int = 3,
    ) -> Result[ProofBundle]:
        """
        Fetch and preprocess a state (account) proof.

        Args:
            address: The account address
            max_depth: Maximum admissible proof depth
            block_number: The block number (latest if None)
            max_retries: Number of retries for RPC calls

        Returns:
            Result[ProofBundle]: Success with the state root and padded
            proof, or failure with error
        """
        context = {
            "address": address,
            "block": block_number,
            "max_depth": max_depth,
        }

        try:
            block_number = self.resolve_block_number(block_number)
            context["block"] = block_number

            def _fetch():
                return fetch_state_proof(
                    self.web3_service,
                    block_number,
                    address,
                    max_depth,
                )

            bundle = RPC_RETRY_CONFIG.with_attempts(max_retries).run(
                _fetch, operation_name=f"state_proof_{address[:10]}"
            )
            _logger.info(
                f"Fetched state proof of depth {bundle['proof'].depth} "
                f"for {address} at block {block_number}"
            )
            return Result.ok(bundle)
        except Exception as e:
            return Result.fail(
                ProcessingError(
                    source="state_proof",
                    message=f"Error fetching state proof: {str(e)}",
                    severity=ErrorSeverity.ERROR,
                    context=context,
                    exception=e,
                )
            )

    @staticmethod
    def verify_bundle(
        bundle: ProofBundle, strict_padding: bool = False
    ) -> Result[bool]:
        """
        Verify a fetched proof against the root it came with.

        A proof that does not match its root is a successful Result holding
        False. A structurally malformed proof is a failed Result. Nonzero
        bytes in the slots past the proof's depth are recorded as a warning,
        or fail the Result when `strict_padding` is set.
        """
        context = {
            "address": bundle["address"],
            "key": bundle["key"],
            "block": bundle["block_number"],
        }
        try:
            result = Result.ok(
                verify_trie_proof(
                    bundle["proof"],
                    bundle["root"],
                    strict_padding=strict_padding,
                )
            )
        except TrieProofStructureError as e:
            result = Result.fail_with_message(
                source="verification",
                message=f"Malformed proof: {e.message}",
                severity=ErrorSeverity.CRITICAL,
                context=context,
                exception=e,
            )

        if not strict_padding and not check_padding(bundle["proof"]):
            _logger.warning(
                f"Padding past depth {bundle['proof'].depth} is not all zero"
            )
            result.add_warning(
                source="padding",
                message="Padding slots past the proof depth are not all zero",
                context=context,
            )
        return result
