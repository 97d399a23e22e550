"""
FridgeChef Backend Configuration
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent
DATA_DIR = Path(os.getenv("FRIDGE_DATA_DIR", str(BASE_DIR / "data")))
INGREDIENTS_PATH = DATA_DIR / "ingredients.json"

# OpenRouter Configuration
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_BASE_URL = os.getenv(
    "OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1/chat/completions"
)
LLM_MODEL = os.getenv("LLM_MODEL", "google/gemini-flash-1.5")

# Values shipped in sample .env files; treated the same as a missing key
PLACEHOLDER_API_KEYS = {"", "YOUR_API_KEY", "your-api-key-here", "changeme"}

# LLM Settings
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "1500"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))

# Recommendation Settings
MAX_RECIPE_SUGGESTIONS = 5

# Ingredients expiring within this many days are flagged as nearing expiry
NEARING_EXPIRY_DAYS = 3

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS - Frontend URLs
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    os.getenv("FRONTEND_URL", ""),  # Production frontend URL
]
# Filter empty strings
CORS_ORIGINS = [origin for origin in CORS_ORIGINS if origin]
