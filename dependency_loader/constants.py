# Path: dependency_loader/constants.py
"""
Dependency Loader Constants

Module-wide constants for dependency resolution and download operations.
Engine-only transport constants live in engine/constants.py.

No hardcoded paths - all paths come from .env via config_loader.
"""

# ============================================================================
# VERSION
# ============================================================================
LOADER_VERSION: str = '1.0.0'

# ============================================================================
# REPOSITORIES
# ============================================================================
MAVEN_CENTRAL_URL: str = 'https://repo1.maven.org/maven2/'
DEFAULT_REPOSITORIES: list = [MAVEN_CENTRAL_URL]

# ============================================================================
# ARTIFACT FILE NAMES
# ============================================================================
BINARY_EXTENSION: str = '.jar'
DESCRIPTOR_EXTENSION: str = '.pom'
CHECKSUM_EXTENSION: str = '.sha1'
SNAPSHOT_SUFFIX: str = '-SNAPSHOT'
SNAPSHOT_TOKEN: str = 'SNAPSHOT'
METADATA_REMOTE_NAME: str = 'maven-metadata.xml'
METADATA_LOCAL_NAME: str = 'meta.xml'

# ============================================================================
# DESCRIPTOR TAGS
# ============================================================================
TAG_DEPENDENCY: str = 'dependency'
TAG_GROUP: str = 'groupId'
TAG_ARTIFACT: str = 'artifactId'
TAG_VERSION: str = 'version'
TAG_SCOPE: str = 'scope'
TAG_OPTIONAL: str = 'optional'
TAG_PARENT: str = 'parent'
TAG_SNAPSHOT: str = 'snapshot'
TAG_TIMESTAMP: str = 'timestamp'
TAG_BUILD_NUMBER: str = 'buildNumber'

# ============================================================================
# SCOPE POLICY DEFAULTS
# ============================================================================
DEFAULT_ALLOWED_SCOPES: frozenset = frozenset({'provided', 'runtime'})
DEFAULT_INCLUDE_UNSCOPED: bool = False

# ============================================================================
# DOWNLOAD CONFIGURATION DEFAULTS
# ============================================================================
DEFAULT_CHUNK_SIZE: int = 8192  # 8KB chunks for streaming
DEFAULT_TIMEOUT: int = 300  # 5 minutes for large files
DEFAULT_CONNECT_TIMEOUT: int = 30  # 30 seconds for connection
DEFAULT_RETRY_ATTEMPTS: int = 3  # Attempts per repository
DEFAULT_RETRY_DELAY: float = 1.0  # Initial retry delay in seconds
DEFAULT_MAX_RETRY_DELAY: int = 60  # Maximum retry delay in seconds
DEFAULT_MAX_CONCURRENT: int = 8  # Maximum concurrent outbound requests

# ============================================================================
# DEFAULT LOCATIONS (relative to working directory)
# ============================================================================
DEFAULT_DEPENDENCY_ROOT: str = 'Dependencies'
DEFAULT_MANIFEST_NAME: str = 'dependencies.json'
DEFAULT_CLASSPATH_NAME: str = 'classpath.txt'
DEFAULT_ENV_FILE: str = '.env'

# ============================================================================
# MANIFEST KEYS
# ============================================================================
MANIFEST_REPOSITORIES: str = 'repositories'
MANIFEST_DEPENDENCIES: str = 'dependencies'
MANIFEST_GROUP: str = 'group'
MANIFEST_ARTIFACT: str = 'artifact'
MANIFEST_VERSION: str = 'version'
MANIFEST_REPOSITORY: str = 'repository'
MANIFEST_ALWAYS_UPDATE: str = 'always-update'

# ============================================================================
# LOGGING
# ============================================================================
LOG_INPUT: str = '[INPUT]'
LOG_PROCESS: str = '[PROCESS]'
LOG_OUTPUT: str = '[OUTPUT]'

LOGGER_ROOT: str = 'dependency_loader'
LOGGER_CORE: str = 'dependency_loader.core'
LOGGER_ENGINE: str = 'dependency_loader.engine'
LOGGER_CLI: str = 'dependency_loader.cli'

LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'

LOG_FILE_ACTIVITY: str = 'activity.log'
LOG_FILE_DOWNLOADS: str = 'downloads.log'
LOG_FILE_ERRORS: str = 'errors.log'

BANNER_WIDTH: int = 45
TRACE_WIDTH: int = 60

# ============================================================================
# ENVIRONMENT VARIABLE NAMES
# ============================================================================
ENV_ROOT: str = 'DEPENDENCY_LOADER_ROOT'
ENV_MANIFEST: str = 'DEPENDENCY_LOADER_MANIFEST'
ENV_CLASSPATH_FILE: str = 'DEPENDENCY_LOADER_CLASSPATH_FILE'
ENV_REPOSITORIES: str = 'DEPENDENCY_LOADER_REPOSITORIES'
ENV_SHOW_DEBUG: str = 'DEPENDENCY_LOADER_SHOW_DEBUG'
ENV_ENFORCE_FILE_CHECK: str = 'DEPENDENCY_LOADER_ENFORCE_FILE_CHECK'
ENV_SCOPES: str = 'DEPENDENCY_LOADER_SCOPES'
ENV_INCLUDE_UNSCOPED: str = 'DEPENDENCY_LOADER_INCLUDE_UNSCOPED'
ENV_REQUEST_TIMEOUT: str = 'DEPENDENCY_LOADER_REQUEST_TIMEOUT'
ENV_CONNECT_TIMEOUT: str = 'DEPENDENCY_LOADER_CONNECT_TIMEOUT'
ENV_RETRY_ATTEMPTS: str = 'DEPENDENCY_LOADER_RETRY_ATTEMPTS'
ENV_RETRY_DELAY: str = 'DEPENDENCY_LOADER_RETRY_DELAY'
ENV_MAX_RETRY_DELAY: str = 'DEPENDENCY_LOADER_MAX_RETRY_DELAY'
ENV_MAX_CONCURRENT: str = 'DEPENDENCY_LOADER_MAX_CONCURRENT'
ENV_CHUNK_SIZE: str = 'DEPENDENCY_LOADER_CHUNK_SIZE'
ENV_USER_AGENT: str = 'DEPENDENCY_LOADER_USER_AGENT'
ENV_LOG_LEVEL: str = 'DEPENDENCY_LOADER_LOG_LEVEL'
ENV_LOG_CONSOLE: str = 'DEPENDENCY_LOADER_LOG_CONSOLE'
ENV_LOG_DIR: str = 'DEPENDENCY_LOADER_LOG_DIR'


__all__ = [
    'LOADER_VERSION',
    'MAVEN_CENTRAL_URL',
    'DEFAULT_REPOSITORIES',
    'BINARY_EXTENSION',
    'DESCRIPTOR_EXTENSION',
    'CHECKSUM_EXTENSION',
    'SNAPSHOT_SUFFIX',
    'SNAPSHOT_TOKEN',
    'METADATA_REMOTE_NAME',
    'METADATA_LOCAL_NAME',
    'TAG_DEPENDENCY',
    'TAG_GROUP',
    'TAG_ARTIFACT',
    'TAG_VERSION',
    'TAG_SCOPE',
    'TAG_OPTIONAL',
    'TAG_PARENT',
    'TAG_SNAPSHOT',
    'TAG_TIMESTAMP',
    'TAG_BUILD_NUMBER',
    'DEFAULT_ALLOWED_SCOPES',
    'DEFAULT_INCLUDE_UNSCOPED',
    'DEFAULT_CHUNK_SIZE',
    'DEFAULT_TIMEOUT',
    'DEFAULT_CONNECT_TIMEOUT',
    'DEFAULT_RETRY_ATTEMPTS',
    'DEFAULT_RETRY_DELAY',
    'DEFAULT_MAX_RETRY_DELAY',
    'DEFAULT_MAX_CONCURRENT',
    'DEFAULT_DEPENDENCY_ROOT',
    'DEFAULT_MANIFEST_NAME',
    'DEFAULT_CLASSPATH_NAME',
    'DEFAULT_ENV_FILE',
    'MANIFEST_REPOSITORIES',
    'MANIFEST_DEPENDENCIES',
    'MANIFEST_GROUP',
    'MANIFEST_ARTIFACT',
    'MANIFEST_VERSION',
    'MANIFEST_REPOSITORY',
    'MANIFEST_ALWAYS_UPDATE',
    'LOG_INPUT',
    'LOG_PROCESS',
    'LOG_OUTPUT',
    'LOGGER_ROOT',
    'LOGGER_CORE',
    'LOGGER_ENGINE',
    'LOGGER_CLI',
    'LOG_FORMAT',
    'LOG_DATE_FORMAT',
    'LOG_FILE_ACTIVITY',
    'LOG_FILE_DOWNLOADS',
    'LOG_FILE_ERRORS',
    'BANNER_WIDTH',
    'TRACE_WIDTH',
    'ENV_ROOT',
    'ENV_MANIFEST',
    'ENV_CLASSPATH_FILE',
    'ENV_REPOSITORIES',
    'ENV_SHOW_DEBUG',
    'ENV_ENFORCE_FILE_CHECK',
    'ENV_SCOPES',
    'ENV_INCLUDE_UNSCOPED',
    'ENV_REQUEST_TIMEOUT',
    'ENV_CONNECT_TIMEOUT',
    'ENV_RETRY_ATTEMPTS',
    'ENV_RETRY_DELAY',
    'ENV_MAX_RETRY_DELAY',
    'ENV_MAX_CONCURRENT',
    'ENV_CHUNK_SIZE',
    'ENV_USER_AGENT',
    'ENV_LOG_LEVEL',
    'ENV_LOG_CONSOLE',
    'ENV_LOG_DIR',
]
