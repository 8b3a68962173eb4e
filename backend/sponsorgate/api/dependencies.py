"""FastAPI dependencies for accessing shared services."""

from typing import Optional

from fastapi import Request

from sponsorgate.services.sponsorship import SponsorshipCoordinator
from sponsorgate.services.verification import InteractionVerifier


class AppState:
    """
    Application state container.

    Holds the services built at startup. One instance lives on
    ``app.state.services`` for the lifetime of the process.
    """

    def __init__(
        self,
        coordinator: Optional[SponsorshipCoordinator] = None,
        verifier: Optional[InteractionVerifier] = None,
        network: Optional[str] = None,
    ) -> None:
        self.coordinator = coordinator
        self.verifier = verifier
        self.network = network


def get_app_state(request: Request) -> AppState:
    """FastAPI dependency for the application state."""
    state: Optional[AppState] = getattr(request.app.state, "services", None)
    if state is None:
        raise RuntimeError("Application state not initialized")
    return state


def get_coordinator(request: Request) -> SponsorshipCoordinator:
    """FastAPI dependency for SponsorshipCoordinator."""
    coordinator = get_app_state(request).coordinator
    if coordinator is None:
        raise RuntimeError("SponsorshipCoordinator not initialized")
    return coordinator


def get_verifier(request: Request) -> InteractionVerifier:
    """FastAPI dependency for InteractionVerifier."""
    verifier = get_app_state(request).verifier
    if verifier is None:
        raise RuntimeError("InteractionVerifier not initialized")
    return verifier
