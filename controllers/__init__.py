from controllers.command_ingestor import CommandIngestor
from controllers.command_listener import CommandListener
from controllers.incubator_controller import IncubatorController

__all__ = [
    'CommandIngestor',
    'CommandListener',
    'IncubatorController',
]
