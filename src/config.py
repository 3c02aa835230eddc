"""
Configuration module for loading environment variables.

This module loads environment variables from .env file and exposes
the tunable thresholds used by the fleet import pipeline.
"""

import os
from dotenv import load_dotenv
load_dotenv()

# Header detection
HEADER_SCAN_ROWS = int(os.getenv("HEADER_SCAN_ROWS", "100"))
HEADER_EARLY_EXIT_MATCHES = int(os.getenv("HEADER_EARLY_EXIT_MATCHES", "4"))
HEADER_MIN_FIELDS = int(os.getenv("HEADER_MIN_FIELDS", "2"))

# PDF reading
PDF_MAX_PAGES = int(os.getenv("PDF_MAX_PAGES", "10"))
PDF_ROW_TOLERANCE = float(os.getenv("PDF_ROW_TOLERANCE", "3.0"))

# Record validation
MAX_PLATE_LENGTH = int(os.getenv("MAX_PLATE_LENGTH", "50"))
MIN_PURCHASE_YEAR = int(os.getenv("MIN_PURCHASE_YEAR", "1950"))

# Keyword dictionary
FLEET_KEYWORDS_MAPPING_ID = os.getenv("FLEET_KEYWORDS_MAPPING_ID", "fleet_keywords_v1")
FLEET_KEYWORDS_FILE = os.getenv("FLEET_KEYWORDS_FILE")
