"""Constants for the configuration module."""

# Default configuration file, resolved against the working directory
DEFAULT_CONFIG_FILE = "config.yaml"

# Log component names
COMPONENT_CONFIG = "config"
COMPONENT_CLI = "cli"
