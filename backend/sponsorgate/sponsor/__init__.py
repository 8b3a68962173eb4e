from sponsorgate.sponsor.client import ENOKI_API_BASE_URL, EnokiClient

__all__ = [
    "ENOKI_API_BASE_URL",
    "EnokiClient",
]
