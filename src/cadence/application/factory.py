"""
Store Factory
Centralizes the wiring of the problem store and service from configuration.
"""

from cadence.application.config import AppConfig
from cadence.application.service import ProblemService
from cadence.domain.ports import ProblemStore
from cadence.infrastructure.adapters.file_store import FileProblemStore


def get_problem_store(config: AppConfig) -> ProblemStore:
    """
    Returns the ProblemStore implementation for the configured path.
    """
    return FileProblemStore(config.store_path)


def get_problem_service(config: AppConfig) -> ProblemService:
    return ProblemService(get_problem_store(config), config)
