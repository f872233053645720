"""
Configuration settings for batch image generation.
"""

import os
from dotenv import load_dotenv
import logging.config
from typing import Dict, Any
from rich.console import Console

# Load environment variables
load_dotenv()

# API Keys and Authentication
# Checked in order; the first non-empty variable wins. Read at call time,
# never cached here, so a key selected mid-session is picked up.
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")

# Image Generation Settings
IMAGE_GENERATION = {
    "model": os.getenv("NEOGEN_MODEL", "gemini-3-pro-image-preview"),
    "image_size": os.getenv("NEOGEN_IMAGE_SIZE", "1K"),  # 1K keeps preview models fast
    "aspect_ratios": ("1:1", "3:4", "4:3", "16:9", "9:16", "4:5"),
    "default_aspect_ratio": "1:1",
    "response_modalities": ["TEXT", "IMAGE"],
}

DEFAULT_PERSONA = (
    "You are a creative artistic assistant. Generate high-quality, detailed, "
    "and visually stunning images based on the user's request. Focus on "
    "lighting, texture, and composition."
)

# Batch Configuration
BATCH_SIZE = {
    "min": 1,
    "max": int(os.getenv("NEOGEN_MAX_BATCH_SIZE", "6")),
    "default": 4,
}

# Logging Configuration
# Log to stderr so stdout stays clean for --json output
LOG_CONSOLE = Console(stderr=True)

LOGGING_CONFIG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        },
        "rich": {
            "format": "%(message)s"
        }
    },
    "handlers": {
        "console": {
            "class": "rich.logging.RichHandler",
            "formatter": "rich",
            "console": "ext://config.LOG_CONSOLE",
            "rich_tracebacks": True,
            "show_path": False,
        },
    },
    "loggers": {
        "": {
            "handlers": ["console"],
            "level": os.getenv("LOG_LEVEL", "INFO"),
            "propagate": True
        }
    }
}

LOG_FILE = os.getenv("LOG_FILE")
if LOG_FILE:
    LOGGING_CONFIG["handlers"]["file"] = {
        "class": "logging.FileHandler",
        "filename": LOG_FILE,
        "formatter": "standard",
    }
    LOGGING_CONFIG["loggers"][""]["handlers"].append("file")

# Convenience aliases
MODEL_ID = IMAGE_GENERATION["model"]
IMAGE_SIZE = IMAGE_GENERATION["image_size"]
ASPECT_RATIOS = IMAGE_GENERATION["aspect_ratios"]
DEFAULT_ASPECT_RATIO = IMAGE_GENERATION["default_aspect_ratio"]
DEFAULT_BATCH_SIZE = BATCH_SIZE["default"]

# Initialize logging
logging.config.dictConfig(LOGGING_CONFIG)
