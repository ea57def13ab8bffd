# votechain/contract.py
# Voting-contract client: read election state and candidates, cast votes.
# The API server never touches the chain; only the voting client uses this.
import logging
from typing import Any, Dict, Optional

from web3 import Web3

from .config import Settings

logger = logging.getLogger(__name__)

CONTRACT_ABI = [
    {
        "inputs": [],
        "name": "electionEnded",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "_candidateId", "type": "uint256"}],
        "name": "getCandidate",
        "outputs": [
            {"internalType": "uint256", "name": "id", "type": "uint256"},
            {"internalType": "string", "name": "name", "type": "string"},
            {"internalType": "uint256", "name": "voteCount", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "_candidateId", "type": "uint256"}],
        "name": "castVote",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class VoteRejected(Exception):
    """The castVote transaction was mined but reverted."""


class VotingContract:
    def __init__(self, w3: Web3, address: str, abi=CONTRACT_ABI, private_key: Optional[str] = None):
        self.w3 = w3
        self.contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        self.private_key = private_key

    @classmethod
    def from_settings(cls, settings: Settings) -> "VotingContract":
        w3 = Web3(Web3.HTTPProvider(settings.web3_provider_uri))
        return cls(w3, settings.contract_address, private_key=settings.voter_private_key)

    def election_ended(self) -> bool:
        return bool(self.contract.functions.electionEnded().call())

    def get_candidate(self, candidate_id: int) -> Dict[str, Any]:
        cid, name, votes = self.contract.functions.getCandidate(int(candidate_id)).call()
        return {"id": int(cid), "name": name, "voteCount": int(votes)}

    def snapshot(self, candidate_id: int = 1) -> Dict[str, Any]:
        """What the voting screen shows: whether the election is over, plus one candidate."""
        return {
            "electionEnded": self.election_ended(),
            "candidate": self.get_candidate(candidate_id),
        }

    def _sender(self) -> str:
        if self.private_key:
            return self.w3.eth.account.from_key(self.private_key).address
        account = self.w3.eth.default_account
        if not account:
            accounts = self.w3.eth.accounts
            if not accounts:
                raise ValueError("No account available: set VOTER_PRIVATE_KEY or unlock an account on the node")
            account = accounts[0]
        return account

    def cast_vote(self, candidate_id: int):
        """
        Send castVote(candidate_id) and wait for the receipt.
        With a private key the transaction is signed locally; otherwise the node signs it.
        """
        sender = self._sender()
        fn = self.contract.functions.castVote(int(candidate_id))

        if self.private_key:
            txn = fn.build_transaction({
                "from": sender,
                "nonce": self.w3.eth.get_transaction_count(sender, "pending"),
            })
            signed = self.w3.eth.account.sign_transaction(txn, private_key=self.private_key)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        else:
            tx_hash = fn.transact({"from": sender})

        logger.info(f"castVote({candidate_id}) sent: {tx_hash.hex()}")
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] != 1:
            raise VoteRejected(f"castVote({candidate_id}) reverted in transaction {tx_hash.hex()}")
        return receipt
