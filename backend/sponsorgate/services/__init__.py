from sponsorgate.services.detection import (
    get_detector,
    move_call_detector,
    substring_detector,
)
from sponsorgate.services.sponsorship import SponsorshipCoordinator
from sponsorgate.services.verification import InteractionVerifier

__all__ = [
    "get_detector",
    "move_call_detector",
    "substring_detector",
    "SponsorshipCoordinator",
    "InteractionVerifier",
]
