import json
import logging
from pathlib import Path
from typing import Optional

from eth_account import Account
from web3 import AsyncWeb3, AsyncHTTPProvider, Web3
from web3.exceptions import Web3Exception
from web3.middleware import SignAndSendRawMiddlewareBuilder

from app.core.config import settings
from app.repositories.ledger_repo import LedgerRepository

logger = logging.getLogger(__name__)

ABI_PATH = Path(__file__).with_name("expense_tracker_abi.json")


class ChainConnection:
    """Chain connection manager."""

    w3: Optional[AsyncWeb3] = None
    ledger: Optional[LedgerRepository] = None
    default_account: Optional[str] = None

chain = ChainConnection()


def load_abi() -> list:
    return json.loads(ABI_PATH.read_text(encoding="utf8"))


async def connect_to_chain():
    """
    Connect to the RPC node and bind the ledger contract.

    A wrong network or an unreachable node leaves the connection unset, so
    every ledger operation reports the session as unavailable.
    """
    w3 = AsyncWeb3(AsyncHTTPProvider(settings.RPC_URL))

    try:
        chain_id = await w3.eth.chain_id
    except (Web3Exception, OSError):
        logger.exception("Could not reach RPC node at %s", settings.RPC_URL)
        return

    if chain_id != settings.CHAIN_ID:
        logger.error("Connected to chain %s, expected %s", chain_id, settings.CHAIN_ID)
        return

    if settings.WALLET_PRIVATE_KEY:
        account = Account.from_key(settings.WALLET_PRIVATE_KEY)
        w3.middleware_onion.inject(SignAndSendRawMiddlewareBuilder.build(account), layer=0)
        chain.default_account = account.address
    else:
        accounts = await w3.eth.accounts
        chain.default_account = Web3.to_checksum_address(accounts[0]) if accounts else None

    contract = w3.eth.contract(
        address=Web3.to_checksum_address(settings.CONTRACT_ADDRESS),
        abi=load_abi()
    )
    chain.w3 = w3
    chain.ledger = LedgerRepository(w3, contract, settings.TX_CONFIRMATION_TIMEOUT)
    logger.info("Connected to chain %s, ledger at %s", chain_id, settings.CONTRACT_ADDRESS)


async def disconnect_from_chain():
    """Drop the chain connection."""
    if chain.w3 is not None:
        await chain.w3.provider.disconnect()
    chain.w3 = None
    chain.ledger = None
    chain.default_account = None
    logger.info("Disconnected from chain")
