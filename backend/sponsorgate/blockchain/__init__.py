from sponsorgate.blockchain.client import SuiClient, get_fullnode_url
from sponsorgate.blockchain.identity import AdminIdentity, AdminKeypair
from sponsorgate.blockchain.transaction import TransactionSubmitter

__all__ = [
    "SuiClient",
    "get_fullnode_url",
    "AdminIdentity",
    "AdminKeypair",
    "TransactionSubmitter",
]
