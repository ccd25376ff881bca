"""Infrastructure modules for the Lexicon application.

Centralized infrastructure components:
- configuration: Settings management (settings, LexiconSettings)
- logging: Structured logging (configure_logging, get_module_logger)
- events: Multicast event streams (EventStream, Subscription)
"""

# Configuration
from infrastructure.configuration import settings

# Observability
from infrastructure.logging import get_module_logger

# Events
from infrastructure.events import EventStream, Subscription

__all__ = [
    # Configuration
    "settings",
    # Observability
    "get_module_logger",
    # Events
    "EventStream",
    "Subscription",
]
