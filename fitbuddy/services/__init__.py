from .companion import CompanionClient, CompanionError, create_companion_client
from .fitness_api import (
    FitnessApiClient,
    FitnessApiError,
    create_fitness_api_client,
    get_fitness_api,
)
from .interfaces import FitnessAPI

__all__ = [
    "CompanionClient",
    "CompanionError",
    "FitnessAPI",
    "FitnessApiClient",
    "FitnessApiError",
    "create_companion_client",
    "create_fitness_api_client",
    "get_fitness_api",
]
