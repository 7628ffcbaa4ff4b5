# Path: nomm/engine/constants.py
"""
Engine Constants

Centralized constants for HTTP handling and install orchestration.
"""

# ============================================================================
# HTTP CLIENT
# ============================================================================
MAX_CONCURRENT_CONNECTIONS = 10
FORCE_CLOSE_CONNECTIONS = False

# ============================================================================
# INSTALL ORCHESTRATION
# ============================================================================
INSTALL_TASK_PREFIX = 'install:'
EXTRACTION_THREAD_PREFIX = 'nomm-extract'
