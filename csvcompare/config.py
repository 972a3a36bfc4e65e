"""
Config - Runtime settings read from the environment (and an optional .env file).
"""

import os
import logging

from dotenv import load_dotenv

load_dotenv()

COLLAPSE = "collapse"
REJECT = "reject"


class Settings:
    """Settings for the loader, the HTTP service and the front end."""

    def __init__(self):
        self.csv_encoding = os.getenv("CSV_ENCODING", "utf-8-sig")
        self.duplicate_headers = os.getenv("DUPLICATE_HEADERS", COLLAPSE).strip().lower()
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.api_host = os.getenv("API_HOST", "0.0.0.0")
        self.api_port = int(os.getenv("API_PORT", "8000"))
        self.backend_url = os.getenv("BACKEND_URL", "http://localhost:8000")

        if self.duplicate_headers not in (COLLAPSE, REJECT):
            logging.getLogger(__name__).warning(
                f"Unknown DUPLICATE_HEADERS value '{self.duplicate_headers}', using '{COLLAPSE}'"
            )
            self.duplicate_headers = COLLAPSE


settings = Settings()
