# src/config.py
import yaml
import os
from pathlib import Path
from dotenv import load_dotenv
import logging
import sys

load_dotenv(override=True)

# ENV VARIABLES
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/chats").strip()
PORT = int(os.getenv("PORT", 3000))

# Allowed cross-origin client
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173").strip()

# Media service (client-side upload signing)
IK_ENDPOINT = os.getenv("IK_ENDPOINT", "").strip()
IK_PUBLIC_KEY = os.getenv("IK_PUBLIC_KEY", "").strip()
IK_SECRET_KEY = os.getenv("IK_SECRET_KEY", "").strip()

# Identity provider session tokens
CLERK_JWT_KEY = os.getenv("CLERK_JWT_KEY", "").strip().replace("\\n", "\n")
CLERK_JWT_ALGORITHM = os.getenv("CLERK_JWT_ALGORITHM", "RS256").strip()
CLERK_AUTHORIZED_PARTIES = [
    party.strip()
    for party in os.getenv("CLERK_AUTHORIZED_PARTIES", "").split(",")
    if party.strip()
]


def configure_logging(level=logging.INFO):
    """Configure logging for the entire application."""
    # Check if already configured to avoid duplicate handlers
    if not logging.getLogger().hasHandlers():
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.addHandler(console_handler)


class Config:
    def __init__(self, config_path: str = "config.yaml"):
        with open(config_path, "r") as file:
            self.config = yaml.safe_load(file) or {}

    def get(self, *keys, default=None):
        """Generalized method to get a value from a nested dictionary."""
        value = self.config
        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_title_max_length(self) -> int:
        return int(self.get("chats", "title_max_length", default=40))


# Allow overriding the config file location via CHATS_CONFIG_PATH
CONFIG_PATH = os.getenv(
    "CHATS_CONFIG_PATH", str(Path(__file__).resolve().parent.parent / "config.yaml")
)
config = Config(CONFIG_PATH)
