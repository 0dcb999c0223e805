"""
Web3 Service module for talking to an Ethereum JSON-RPC node.

Only the calls the proof fetchers need are wrapped here: block lookup,
latest block number and eth_getProof. Block headers are cached per
instance, so a manager proving several accounts at one block fetches the
header once.
"""

from typing import Any, Dict, List, Optional, Union

from web3 import Web3


class Web3Service:
    """
    A service class for managing a Web3 connection.
    """

    def __init__(
        self,
        chain_id: int,
        rpc_url: str,
    ):
        """
        Initialize the Web3Service.

        Args:
            chain_id (int): The chain ID to use.
            rpc_url (str): The RPC URL to use.
        """
        self.chain_id = chain_id
        self.w3 = Web3(Web3.HTTPProvider(rpc_url))
        self._block_cache: Dict[Union[int, str], Any] = {}

    def get_latest_block_number(self) -> int:
        """Get the number of the latest block"""
        return self.w3.eth.block_number

    def get_block(self, block_identifier: int) -> Optional[Dict[str, Any]]:
        """Get block information for a specific block number"""
        if block_identifier not in self._block_cache:
            block = self.w3.eth.get_block(block_identifier)
            if block is None:
                return None
            self._block_cache[block_identifier] = block
        return self._block_cache[block_identifier]

    def get_proof(
        self,
        address: str,
        slots: List[Union[int, str]],
        block_identifier: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Call eth_getProof for an account and optional storage slots"""
        return self.w3.eth.get_proof(
            Web3.to_checksum_address(address.lower()),
            slots,
            block_identifier if block_identifier is not None else "latest",
        )
