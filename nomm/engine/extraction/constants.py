# Path: nomm/engine/extraction/constants.py
"""
Extraction Constants

Constants for format dispatch and entry streaming.
"""

# ============================================================================
# FORMAT DISPATCH (lowercase extension of the source name)
# ============================================================================
EXT_ZIP = 'zip'
EXT_7Z = '7z'
EXT_RAR = 'rar'

# ============================================================================
# EXTRACTOR NAMES (reported in ExtractionResult)
# ============================================================================
EXTRACTOR_ZIP = 'zip'
EXTRACTOR_7Z = '7z'
EXTRACTOR_RAR = 'rar'
EXTRACTOR_RAW = 'raw'

# ============================================================================
# I/O
# ============================================================================
ZIP_READ_MODE = 'r'
SEVENZIP_READ_MODE = 'r'
WRITE_BINARY_MODE = 'wb'
COPY_BUFFER_SIZE = 8192
