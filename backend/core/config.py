from dotenv import load_dotenv
import os

load_dotenv()

SERVICE_NAME = os.getenv("SERVICE_NAME", "ace-cag")
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "1.0.0")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
PORT = int(os.getenv("PORT", "3000"))
API_BASE_PATH = os.getenv("API_BASE_PATH", "/sas-cag/v1")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "").strip()
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
DEFAULT_LLM_PROVIDER = os.getenv("DEFAULT_LLM_PROVIDER", "gemini")
DEFAULT_LLM_MODEL = os.getenv("DEFAULT_LLM_MODEL", "gemini-2.5-flash")
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MAX_TOKENS_DEFAULT = int(os.getenv("MAX_TOKENS_DEFAULT", "800"))
MAX_INSIGHTS_DEFAULT = int(os.getenv("MAX_INSIGHTS_DEFAULT", "5"))
ANALYSIS_TIMEOUT_MS = int(os.getenv("ANALYSIS_TIMEOUT_MS", "30000"))
ANOMALY_THRESHOLD = float(os.getenv("ANOMALY_THRESHOLD", "2.5"))

MULTI_TENANT_ENABLED = os.getenv("MULTI_TENANT_ENABLED", "true").lower() in ("true", "1", "yes")
