from typing import Callable

from treasure_hunt.config import Config
from treasure_hunt.datasets import DatasetSnapshot, SnapshotProvider, policy_from_config
from treasure_hunt.generator import ChallengeRecord, generate_challenge
from treasure_hunt.logging_config import configure_logging_from_config
from treasure_hunt.service import ChallengeService


def create_service(loader: Callable[[], DatasetSnapshot], config_class=Config) -> ChallengeService:
    """Service factory function"""
    configure_logging_from_config(config_class)

    provider = SnapshotProvider(loader, policy=policy_from_config(config_class))
    return ChallengeService(provider, config=config_class)


__all__ = [
    "ChallengeRecord",
    "ChallengeService",
    "DatasetSnapshot",
    "SnapshotProvider",
    "create_service",
    "generate_challenge",
]
