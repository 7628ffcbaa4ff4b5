# Path: nomm/constants.py
"""
Mod Manager Constants

Module-wide constants for catalog, install and extraction operations.
Engine-specific constants go in engine/constants.py.

No hardcoded paths - all paths come from .env via config_loader.
"""

# ============================================================================
# TASK PHASES
# ============================================================================
PHASE_DOWNLOADING: str = 'downloading'
PHASE_EXTRACTING: str = 'extracting'

# ============================================================================
# HTTP STATUS CODES
# ============================================================================
HTTP_TOO_MANY_REQUESTS: int = 429
HTTP_SERVER_ERROR: int = 500
HTTP_BAD_GATEWAY: int = 502
HTTP_SERVICE_UNAVAILABLE: int = 503
HTTP_GATEWAY_TIMEOUT: int = 504
RETRYABLE_STATUS_CODES: list = [
    HTTP_TOO_MANY_REQUESTS,
    HTTP_SERVER_ERROR,
    HTTP_BAD_GATEWAY,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_GATEWAY_TIMEOUT
]

# ============================================================================
# HTTP HEADERS
# ============================================================================
DEFAULT_USER_AGENT: str = 'NuclearOptionModManager/1.0'
DEFAULT_ACCEPT_HEADER: str = '*/*'
DEFAULT_ACCEPT_ENCODING: str = 'gzip, deflate'

HEADER_USER_AGENT: str = 'User-Agent'
HEADER_ACCEPT: str = 'Accept'
HEADER_ACCEPT_ENCODING: str = 'Accept-Encoding'

# ============================================================================
# DOWNLOAD CONFIGURATION DEFAULTS
# ============================================================================
DEFAULT_CHUNK_SIZE: int = 8192  # 8KB chunks for streaming
DEFAULT_TIMEOUT: int = 300  # 5 minutes for large archives
DEFAULT_CONNECT_TIMEOUT: int = 30
DEFAULT_RETRY_ATTEMPTS: int = 3  # Total attempts, not retries
DEFAULT_RETRY_DELAY: float = 1.0  # Linear: attempt i waits delay * i
DEFAULT_MANIFEST_RETRY_ATTEMPTS: int = 3
DEFAULT_MAX_CONCURRENT: int = 3  # Background extraction workers

# ============================================================================
# EXTRACTION DEFAULTS
# ============================================================================
MAX_EXTRACTION_DEPTH: int = 25  # Maximum directory nesting depth
DEFAULT_RAW_FILENAME: str = 'download'

# ============================================================================
# PREREQUISITE (mod loader runtime)
# ============================================================================
PREREQUISITE_ID: str = 'BepInEx'
DEFAULT_PREREQUISITE_URL: str = (
    'https://github.com/BepInEx/BepInEx/releases/download/'
    'v5.4.23.4/BepInEx_win_x64_5.4.23.4.zip'
)

# ============================================================================
# FILESYSTEM LAYOUT
# ============================================================================
BEPINEX_DIR_NAME: str = 'BepInEx'
PLUGINS_DIR_NAME: str = 'plugins'
DISABLED_PLUGINS_DIR_NAME: str = 'disabledPlugins'
META_FILENAME: str = 'meta.json'
META_JSON_INDENT: int = 4

# ============================================================================
# ENVIRONMENT VARIABLE NAMES
# ============================================================================
ENV_GAME_FOLDER: str = 'NOMM_GAME_FOLDER'
ENV_MANIFEST_URL: str = 'NOMM_MANIFEST_URL'
ENV_MANIFEST_PATH: str = 'NOMM_MANIFEST_PATH'
ENV_PREREQUISITE_URL: str = 'NOMM_BEPINEX_URL'
ENV_REQUEST_TIMEOUT: str = 'NOMM_REQUEST_TIMEOUT'
ENV_CONNECT_TIMEOUT: str = 'NOMM_CONNECT_TIMEOUT'
ENV_CHUNK_SIZE: str = 'NOMM_CHUNK_SIZE'
ENV_RETRY_ATTEMPTS: str = 'NOMM_RETRY_ATTEMPTS'
ENV_RETRY_DELAY: str = 'NOMM_RETRY_DELAY'
ENV_MANIFEST_RETRY_ATTEMPTS: str = 'NOMM_MANIFEST_RETRY_ATTEMPTS'
ENV_MAX_CONCURRENT: str = 'NOMM_MAX_CONCURRENT'
ENV_MAX_EXTRACTION_DEPTH: str = 'NOMM_MAX_EXTRACTION_DEPTH'
ENV_LOG_DIR: str = 'NOMM_LOG_DIR'
ENV_LOG_LEVEL: str = 'NOMM_LOG_LEVEL'
ENV_LOG_CONSOLE: str = 'NOMM_LOG_CONSOLE'

# ============================================================================
# LOGGING
# ============================================================================
LOG_INPUT: str = '[INPUT]'
LOG_PROCESS: str = '[PROCESS]'
LOG_OUTPUT: str = '[OUTPUT]'

LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'

LOGGER_ROOT: str = 'nomm'
LOGGER_CORE: str = 'nomm.core'
LOGGER_ENGINE: str = 'nomm.engine'
LOGGER_EXTRACTION: str = 'nomm.extraction'
LOGGER_CATALOG: str = 'nomm.catalog'
LOGGER_LOCAL: str = 'nomm.local'

ACTIVITY_LOG_FILENAME: str = 'nomm_activity.log'
INSTALL_LOG_FILENAME: str = 'installs.log'
ERROR_LOG_FILENAME: str = 'errors.log'
