# extension_recommender/utils/logging.py
import logging
from pathlib import Path


def setup_logging(config_dir: Path, debug: bool = False):
    """Setup logging for the extension recommender"""
    log_dir = config_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "extension-recommender.log"

    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger('extension_recommender')
    root_logger.setLevel(logging.DEBUG)

    # Repeated CLI callbacks must not stack handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # File handler - always detailed
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose unless debug
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(console_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return root_logger


def get_logger(name: str):
    """Get a logger instance"""
    return logging.getLogger(f'extension_recommender.{name}')
