from duvidapp.config.settings import Settings, settings
from duvidapp.config.logging_config import configure_logging
