"""FastAPI application for the sponsorgate API."""

import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sponsorgate.api.dependencies import AppState
from sponsorgate.api.routes import sponsorship, verification
from sponsorgate.blockchain.client import SuiClient
from sponsorgate.blockchain.identity import AdminIdentity, AdminKeypair
from sponsorgate.blockchain.transaction import TransactionSubmitter
from sponsorgate.config import Settings
from sponsorgate.errors import ConfigurationError, SponsorGateError
from sponsorgate.services.detection import get_detector
from sponsorgate.services.sponsorship import SponsorshipCoordinator
from sponsorgate.services.verification import InteractionVerifier
from sponsorgate.sponsor.client import EnokiClient

logger = logging.getLogger(__name__)


def build_services(settings: Settings) -> tuple[AppState, list[Callable[[], Awaitable[None]]]]:
    """
    Construct every service from settings.

    Returns:
        The populated AppState and the close callbacks for its HTTP clients

    Raises:
        ConfigurationError: If the admin secret key cannot be decoded
    """
    try:
        admin_keypair = AdminKeypair.from_secret(settings.admin_secret_key)
    except ValueError as e:
        raise ConfigurationError(f"Invalid ADMIN_SECRET_KEY: {e}") from e

    identity = AdminIdentity(
        keypair=admin_keypair,
        package_id=settings.package_id,
        registry_id=settings.registry_id,
        cap_id=settings.indexer_cap_id,
        module=settings.registry_module,
    )

    sui_client = SuiClient(settings.sui_rpc_url, timeout=settings.http_timeout)
    enoki_client = EnokiClient(
        api_key=settings.enoki_api_key,
        base_url=settings.enoki_base_url,
        timeout=settings.http_timeout,
    )
    submitter = TransactionSubmitter(
        gateway=sui_client,
        identity=identity,
        gas_budget=settings.gas_budget,
    )

    state = AppState(
        coordinator=SponsorshipCoordinator(
            sponsor=enoki_client,
            chain=sui_client,
            network=settings.network,
        ),
        verifier=InteractionVerifier(
            history=sui_client,
            recorder=submitter,
            detector=get_detector(settings.detection_strategy),
        ),
        network=settings.network,
    )

    logger.info(f"Network: {settings.network} ({settings.sui_rpc_url})")
    logger.info(f"Enoki configured: {bool(settings.enoki_api_key)}")
    logger.info(f"Admin address: {submitter.admin_address}")
    logger.info(f"Interaction detection: {settings.detection_strategy}")

    return state, [sui_client.close, enoki_client.close]


def create_app(
    settings: Optional[Settings] = None,
    coordinator: Optional[SponsorshipCoordinator] = None,
    verifier: Optional[InteractionVerifier] = None,
    network: Optional[str] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to build services from (read from the
            environment at startup if not provided)
        coordinator: Prebuilt SponsorshipCoordinator (skips building)
        verifier: Prebuilt InteractionVerifier (skips building)
        network: Network name reported by the health check when services
            are injected

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        closers: list[Callable[[], Awaitable[None]]] = []

        if coordinator is not None and verifier is not None:
            app.state.services = AppState(
                coordinator=coordinator,
                verifier=verifier,
                network=network or coordinator.network,
            )
        else:
            # Raising here aborts startup before any request is served
            app.state.services, closers = build_services(settings or Settings.from_env())

        logger.info("sponsorgate started")

        yield

        for close in closers:
            await close()
        logger.info("sponsorgate stopped")

    app = FastAPI(
        title="sponsorgate",
        description="Gasless transaction sponsorship and dApp interaction verification on Sui",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(SponsorGateError)
    async def sponsorgate_error_handler(request: Request, exc: SponsorGateError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Malformed request body", "message": str(exc.errors())},
        )

    # Include routes
    app.include_router(sponsorship.router)
    app.include_router(verification.router)

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        state: Optional[AppState] = getattr(request.app.state, "services", None)
        return {"status": "ok", "network": state.network if state else None}

    return app


# Default app instance for uvicorn
app = create_app()
