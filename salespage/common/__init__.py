# Common utilities
from .config_loader import (
    load_chat_rules,
    load_config,
    load_extraction_config,
    load_settings,
)
from .log_config import setup_logging
from .text_utils import normalize, truncate
