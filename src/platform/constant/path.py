from pathlib import Path


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'

# Local mirror of shows/bookings when no STORAGE_DIR is configured
STORAGE_DIR = BASE_DIR / 'local_storage'
