"""
Farm Advisor - runtime settings read from the environment (and a local .env file).
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

SECRET_KEY = os.getenv("AGRI_SECRET_KEY", "farm-advisor-dev-secret-change-in-production")
ALGORITHM = os.getenv("AGRI_JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("AGRI_TOKEN_EXPIRE_MINUTES", "60"))
LOG_LEVEL = os.getenv("AGRI_LOG_LEVEL", "INFO").upper()


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


CORS_ORIGINS = _split_origins(os.getenv("AGRI_CORS_ORIGINS", "*"))
