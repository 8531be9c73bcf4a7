"""
Web3 Service module holding the connected session.

A Web3Service is the explicit session context of the client: the Web3
connection, the account that signs transactions, the network it is on and
the CrowdFunding contract resolved for that network. It is created once and
passed around; nothing in the package keeps it in module state.
"""

from typing import Any, Dict, List, Optional

from eth_utils import to_checksum_address
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from decrowdfund.shared.constants import ContractConstants, Settings
from decrowdfund.shared.exceptions import ConfigurationException
from decrowdfund.shared.logging import get_logger
from decrowdfund.shared.services.resource_manager import resource_manager

logger = get_logger(__name__)


class Web3Service:
    """
    Session bound to one node, one account and one contract deployment.

    Attributes:
        w3: Web3 instance
        artifact: Contract artifact (``abi`` + ``networks``)
        account: Checksummed address used as transaction sender
        network_id: Network id as reported by ``net_version``
        contract: Contract instance at the deployment for network_id
    """

    def __init__(
        self,
        w3: Web3,
        artifact: Dict[str, Any],
        account_index: int = 0,
    ):
        self.w3 = w3
        self.artifact = artifact
        self.account_index = account_index
        self.account: Optional[str] = None
        self.network_id: Optional[str] = None
        self.contract: Any = None
        self.bind()

    @classmethod
    def connect(cls, settings: Optional[Settings] = None) -> "Web3Service":
        """Open a session against the configured RPC endpoint.

        Raises:
            ConfigurationException: No accounts, or no deployment for the
                connected network.
        """
        settings = settings or Settings.from_env()
        artifact = resource_manager.load_artifact(
            ContractConstants.ARTIFACT_NAME, settings.artifact_path
        )
        try:
            w3 = cls._initialize_web3(settings.rpc_url)
            return cls(w3, artifact, account_index=settings.account_index)
        except OSError as e:
            raise ConfigurationException(
                f"Cannot reach node at {settings.rpc_url}: {e}"
            ) from e

    @staticmethod
    def _initialize_web3(rpc_url: str) -> Web3:
        """Initialize Web3 instance with middleware if needed"""
        w3 = Web3(Web3.HTTPProvider(rpc_url))

        # PoA dev chains put extra bytes in the header
        if w3.eth.chain_id != 1:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        return w3

    @property
    def contract_address(self) -> Optional[str]:
        return self.contract.address if self.contract is not None else None

    def _read_accounts(self) -> List[str]:
        accounts = list(self.w3.eth.accounts)
        if len(accounts) <= self.account_index:
            raise ConfigurationException(
                f"No account at index {self.account_index} "
                f"({len(accounts)} available)"
            )
        return accounts

    def _read_network_id(self) -> str:
        return str(self.w3.net.version)

    def resolve_deployment(self, network_id: str) -> str:
        """Contract address for a network id from the artifact table."""
        deployment = self.artifact.get("networks", {}).get(str(network_id))
        address = deployment.get("address") if deployment else None
        if not address:
            raise ConfigurationException(
                "Smart contract not deployed on this network "
                f"(network id {network_id})."
            )
        return to_checksum_address(address)

    def bind(self) -> None:
        """(Re)read account and network, and resolve the contract."""
        accounts = self._read_accounts()
        network_id = self._read_network_id()
        address = self.resolve_deployment(network_id)

        self.account = to_checksum_address(accounts[self.account_index])
        self.network_id = network_id
        self.contract = self.w3.eth.contract(
            address=address, abi=self.artifact["abi"]
        )
        logger.info(
            f"Session bound: account {self.account} on network "
            f"{self.network_id}, contract {address}"
        )

    def reconcile(self) -> bool:
        """
        Detect an account or network switch since the last bind.

        Returns True when the session was rebound. A switch to a network
        without a deployment raises ConfigurationException, same as at
        startup.
        """
        accounts = self._read_accounts()
        network_id = self._read_network_id()
        account = to_checksum_address(accounts[self.account_index])

        if account == self.account and network_id == self.network_id:
            return False

        logger.info(
            f"Session changed: account {self.account} -> {account}, "
            f"network {self.network_id} -> {network_id}"
        )
        self.bind()
        return True
