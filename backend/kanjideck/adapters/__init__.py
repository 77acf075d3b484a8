# Adapters layer - Concrete implementations (WaniKani API, demo deck, credentials)

from .credentials import EnvCredentialProvider, StaticCredentialProvider
from .demo_deck import DemoDeckAdapter
from .wanikani import WaniKaniAdapter

__all__ = [
    "DemoDeckAdapter",
    "EnvCredentialProvider",
    "StaticCredentialProvider",
    "WaniKaniAdapter",
]
