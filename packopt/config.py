# packopt/config.py

import os
from dotenv import load_dotenv

# Load env vars from .env file
load_dotenv()

DATABASE_URL = os.environ.get("PACKOPT_DATABASE_URL", "sqlite:///packs.db")

# Catalog seeded into an empty database
DEFAULT_PACK_SIZES = (250, 500, 1000, 2000, 5000)

# The engine has no upper limit of its own; the API refuses anything larger
MAX_ORDER_QUANTITY = int(os.environ.get("PACKOPT_MAX_ORDER_QUANTITY", "10000000"))

LOG_LEVEL = os.environ.get("PACKOPT_LOG_LEVEL", "INFO").upper()

PORT = int(os.environ.get("PORT", "8080"))

# Largest pack size a catalog update may store; with MAX_ORDER_QUANTITY it bounds the DP table
MAX_PACK_SIZE = int(os.environ.get("PACKOPT_MAX_PACK_SIZE", "100000"))
