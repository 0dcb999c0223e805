"""Runtime configuration for the project"""

import os

from dotenv import load_dotenv

from trie_proof_toolkit.shared.exceptions import ConfigurationException

load_dotenv()


class GlobalConstants:
    """Global class constants for the project"""

    MAINNET_CHAIN_ID = 1

    CHAIN_ID_TO_RPC = {
        1: os.getenv("ETHEREUM_MAINNET_RPC_URL") or None,
        11155111: os.getenv("ETHEREUM_SEPOLIA_RPC_URL") or None,
        17000: os.getenv("ETHEREUM_HOLESKY_RPC_URL") or None,
    }

    # Defaults used when the CLI is not told otherwise
    DEFAULT_STORAGE_ROOT_NAME = "storage_root"
    DEFAULT_STORAGE_PROOF_NAME = "storage_proof"
    DEFAULT_STATE_ROOT_NAME = "state_root"
    DEFAULT_STATE_PROOF_NAME = "state_proof"

    @staticmethod
    def get_rpc_url(chain_id: int = MAINNET_CHAIN_ID) -> str:
        """Get RPC URL for specified chain"""
        chain_id = int(chain_id)
        if chain_id not in GlobalConstants.CHAIN_ID_TO_RPC:
            raise ConfigurationException(f"Chain ID {chain_id} not supported")

        rpc_url = GlobalConstants.CHAIN_ID_TO_RPC[chain_id]
        if not rpc_url:
            raise ConfigurationException(
                f"RPC URL not set for chain {chain_id}"
            )

        return rpc_url
