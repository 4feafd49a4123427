from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Message bodies (after strip) that reset the user instead of routing
    RESET_COMMANDS: List[str] = ["!RESET", "/reset"]

    # Auto-response threshold used when a rule does not set its own
    DEFAULT_MINIMUM_CONFIDENCE: float = 0.5

    # Sender roles processed when a flow does not declare senderRolesToProcess
    DEFAULT_SENDER_ROLES: List[str] = ["end-user"]

    # Reported back to the caller with every finished turn
    VERSION: Optional[str] = None

    # Loads from CONVO_FLOW_* env vars or a .env file in the root directory
    model_config = SettingsConfigDict(
        env_prefix="CONVO_FLOW_", env_file=".env", extra="ignore"
    )

# Singleton instance
settings = Settings()
