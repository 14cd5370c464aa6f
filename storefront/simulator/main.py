"""Storefront Simulator main application.

An in-memory implementation of the storefront REST API (products, cart,
addresses, checkout, auth) for local development and end-to-end tests.
All failures are returned as ``{"success": false, "message": ...}``.
"""

from typing import Annotated

import structlog
from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from storefront import __version__
from storefront.infrastructure.logging_config import configure_logging
from storefront.infrastructure.schemas import (
    AddressCreateRequest,
    AddressSchema,
    CartItemRequest,
    CartRowSchema,
    CheckoutRequest,
    CheckoutResponse,
    CredentialsRequest,
    ErrorResponse,
    LoginResponse,
    ProductSchema,
    RegisterResponse,
)
from storefront.simulator.store import (
    SimulatedUser,
    SimulatorError,
    SimulatorStore,
    get_simulator_store,
)

# Configure logging
configure_logging()

logger = structlog.get_logger()


app = FastAPI(
    title="Storefront Simulator",
    description="In-memory storefront backend (catalog, cart, addresses, checkout)",
    version=__version__,
)


@app.exception_handler(SimulatorError)
async def simulator_error_handler(request: Request, exc: SimulatorError) -> JSONResponse:
    """Render simulator failures in the storefront error format."""
    logger.info(
        "Simulator request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        message=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


# ============================================================================
# Response Models
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    product_count: int
    user_count: int


# ============================================================================
# Dependencies
# ============================================================================


def get_store() -> SimulatorStore:
    """Get simulator store dependency."""
    return get_simulator_store()


def get_current_user(
    store: Annotated[SimulatorStore, Depends(get_store)],
    authorization: Annotated[str | None, Header()] = None,
) -> SimulatedUser:
    """Resolve the bearer token to a user."""
    return store.authenticate(authorization)


# ============================================================================
# Health Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    store: Annotated[SimulatorStore, Depends(get_store)],
) -> HealthResponse:
    """Check simulator health."""
    return HealthResponse(
        status="healthy",
        service="storefront-simulator",
        version=__version__,
        product_count=len(store.products),
        user_count=store.user_count,
    )


# ============================================================================
# Auth Endpoints
# ============================================================================


@app.post(
    "/auth/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Auth"],
)
async def register(
    request: CredentialsRequest,
    store: Annotated[SimulatorStore, Depends(get_store)],
) -> RegisterResponse:
    store.register(request.username, request.password)
    return RegisterResponse()


@app.post("/auth/login", response_model=LoginResponse, tags=["Auth"])
async def login(
    request: CredentialsRequest,
    store: Annotated[SimulatorStore, Depends(get_store)],
) -> LoginResponse:
    token, user = store.login(request.username, request.password)
    return LoginResponse(token=token, username=user.username, balance=user.balance)


# ============================================================================
# Product Endpoints
# ============================================================================


@app.get("/products", response_model=list[ProductSchema], tags=["Products"])
async def list_products(
    store: Annotated[SimulatorStore, Depends(get_store)],
) -> list[ProductSchema]:
    return store.products


@app.get("/products/search", response_model=list[ProductSchema], tags=["Products"])
async def search_products(
    value: str,
    store: Annotated[SimulatorStore, Depends(get_store)],
) -> list[ProductSchema]:
    return store.search(value)


# ============================================================================
# Cart Endpoints
# ============================================================================


@app.get("/cart", response_model=list[CartRowSchema], tags=["Cart"])
async def get_cart(
    user: Annotated[SimulatedUser, Depends(get_current_user)],
) -> list[CartRowSchema]:
    return user.cart


@app.post("/cart", response_model=list[CartRowSchema], tags=["Cart"])
async def update_cart(
    request: CartItemRequest,
    store: Annotated[SimulatorStore, Depends(get_store)],
    user: Annotated[SimulatedUser, Depends(get_current_user)],
) -> list[CartRowSchema]:
    return store.set_cart_item(user, request.product_id, request.qty)


@app.post("/cart/checkout", response_model=CheckoutResponse, tags=["Cart"])
async def checkout(
    request: CheckoutRequest,
    store: Annotated[SimulatorStore, Depends(get_store)],
    user: Annotated[SimulatedUser, Depends(get_current_user)],
) -> CheckoutResponse:
    store.checkout(user, request.address_id)
    return CheckoutResponse(success=True)


# ============================================================================
# Address Endpoints
# ============================================================================


@app.get("/user/addresses", response_model=list[AddressSchema], tags=["Addresses"])
async def list_addresses(
    user: Annotated[SimulatedUser, Depends(get_current_user)],
) -> list[AddressSchema]:
    return user.addresses


@app.post("/user/addresses", response_model=list[AddressSchema], tags=["Addresses"])
async def add_address(
    request: AddressCreateRequest,
    store: Annotated[SimulatorStore, Depends(get_store)],
    user: Annotated[SimulatedUser, Depends(get_current_user)],
) -> list[AddressSchema]:
    return store.add_address(user, request.address)


@app.delete(
    "/user/addresses/{address_id}",
    response_model=list[AddressSchema],
    tags=["Addresses"],
)
async def delete_address(
    address_id: str,
    store: Annotated[SimulatorStore, Depends(get_store)],
    user: Annotated[SimulatedUser, Depends(get_current_user)],
) -> list[AddressSchema]:
    return store.delete_address(user, address_id)
