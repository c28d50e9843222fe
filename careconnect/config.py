import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./careconnect.db")

# JWT
SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-secret")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "43200"))

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Public identifiers are random integers in [1, PUBLIC_ID_MAX]
PUBLIC_ID_MAX = int(os.getenv("PUBLIC_ID_MAX", "999999"))
PUBLIC_ID_ATTEMPTS = int(os.getenv("PUBLIC_ID_ATTEMPTS", "20"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
