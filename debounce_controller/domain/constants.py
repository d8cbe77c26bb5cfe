# Debounce
DEFAULT_WAIT_SECONDS = 0.3  # Quiet period used when no wait is given

# Logging
LOG_LEVEL_ENV_VAR = "DEBOUNCE_LOG_LEVEL"  # Read by setup_logging() when no level is passed
PACKAGE_LOGGER_NAME = "debounce_controller"  # Parent of every module logger in the package
