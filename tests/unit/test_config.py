"""
Unit tests for runtime configuration and the Web3 service.
"""

from unittest.mock import MagicMock, patch

import pytest

from trie_proof_toolkit.shared.constants import GlobalConstants
from trie_proof_toolkit.shared.exceptions import ConfigurationException
from trie_proof_toolkit.shared.services.web3_service import Web3Service


class TestGlobalConstants:
    def test_unsupported_chain(self):
        with pytest.raises(ConfigurationException, match="not supported"):
            GlobalConstants.get_rpc_url(56)

    def test_missing_rpc_url(self):
        with patch.dict(GlobalConstants.CHAIN_ID_TO_RPC, {1: None}):
            with pytest.raises(ConfigurationException, match="not set"):
                GlobalConstants.get_rpc_url(1)

    def test_configured_rpc_url(self):
        with patch.dict(
            GlobalConstants.CHAIN_ID_TO_RPC, {1: "http://node:8545"}
        ):
            assert GlobalConstants.get_rpc_url("1") == "http://node:8545"


class TestWeb3Service:
    @pytest.fixture
    def service(self):
        with patch(
            "trie_proof_toolkit.shared.services.web3_service.Web3"
        ) as web3_cls:
            web3_cls.to_checksum_address.side_effect = lambda a: a.upper()
            web3_cls.return_value = MagicMock()
            yield Web3Service(1, "http://node:8545")

    def test_blocks_are_cached(self, service):
        service.w3.eth.get_block.return_value = {"stateRoot": b"\x01" * 32}

        first = service.get_block(14194126)
        second = service.get_block(14194126)

        assert first is second
        service.w3.eth.get_block.assert_called_once_with(14194126)

    def test_latest_block_number(self, service):
        service.w3.eth.block_number = 123
        assert service.get_latest_block_number() == 123

    def test_get_proof_defaults_to_latest(self, service):
        service.get_proof("0xabc", [1])
        service.w3.eth.get_proof.assert_called_once_with("0XABC", [1], "latest")

    def test_get_proof_at_block(self, service):
        service.get_proof("0xabc", [], 5)
        service.w3.eth.get_proof.assert_called_once_with("0XABC", [], 5)

    def test_missing_block_is_not_cached(self, service):
        """A block the node does not know yet is looked up again."""
        service.w3.eth.get_block.side_effect = [
            None,
            {"stateRoot": b"\x02" * 32},
        ]

        assert service.get_block(14194127) is None
        assert service.get_block(14194127) == {"stateRoot": b"\x02" * 32}
        assert service.w3.eth.get_block.call_count == 2
