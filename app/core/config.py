from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API Settings
    PROJECT_NAME: str = "Chainsplit API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Shared expense tracking and overdue settlement on an on-chain ledger"

    # Chain
    RPC_URL: str = "http://localhost:8545"
    CHAIN_ID: int = 11155111  # Sepolia
    CONTRACT_ADDRESS: str = "0x98BEEBB0d66B7F78CF69C5902C2Bd3110b4b484E"

    # Wallet (empty = use the node's first managed account)
    WALLET_PRIVATE_KEY: str = ""

    # Passed to the transport's receipt wait, the services never time out on their own
    TX_CONFIRMATION_TIMEOUT: float = 120.0

    # Price oracle (display only)
    PRICE_ORACLE_URL: str = "https://api.coingecko.com/api/v3/simple/price"
    PRICE_ORACLE_TIMEOUT: float = 10.0
    DISPLAY_CURRENCY: str = "inr"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
