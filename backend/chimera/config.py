import os
import logging
from dotenv import load_dotenv
load_dotenv()

logger = logging.getLogger(__name__)

CONFIG = {}

# Local OpenAI-compatible server (LM Studio by default)
CONFIG["LLM_BASE_URL"]    = os.getenv("LLM_BASE_URL", "http://localhost:1234/v1")
CONFIG["LLM_MODEL"]       = os.getenv("LLM_MODEL", "local-model")
CONFIG["LLM_API_KEY"]     = os.getenv("LLM_API_KEY", "lm-studio")
CONFIG["LLM_TEMPERATURE"] = float(os.getenv("LLM_TEMPERATURE", "0.7"))

CONFIG["TURN_INTERVAL_SECONDS"] = float(os.getenv("TURN_INTERVAL_SECONDS", "1"))
CONFIG["PROJECT_NAME"]          = os.getenv("PROJECT_NAME", "Project Chimera")

# Normalize endpoint
CONFIG["LLM_BASE_URL"] = CONFIG["LLM_BASE_URL"].rstrip("/")

logger.info("CONFIG LOADED: %s", {k: v for k, v in CONFIG.items() if k != "LLM_API_KEY"})
