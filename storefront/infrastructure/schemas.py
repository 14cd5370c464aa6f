"""Wire schemas for the storefront service.

One pydantic model per request and response body. Field aliases match
the service's JSON (``_id``, ``productId``, ``addressId``); Python code
uses the snake_case names. Response models convert to domain models.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer

from storefront.domain.models import Address, CartRow, Product


class WireModel(BaseModel):
    """Base for wire models: accept aliases or field names, ignore extras."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _json_number(value: Decimal) -> int | float:
    """Render a Decimal as a JSON number rather than a string."""
    return int(value) if value == value.to_integral_value() else float(value)


# ============================================================================
# Responses
# ============================================================================


class ProductSchema(WireModel):
    """Product as returned by ``GET /products``."""

    id: str = Field(alias="_id")
    name: str
    category: str = ""
    cost: Decimal = Field(ge=0)
    rating: int = Field(default=0, ge=0, le=5)
    image: str = ""

    @field_serializer("cost", when_used="json")
    def serialize_cost(self, cost: Decimal) -> int | float:
        return _json_number(cost)

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            category=self.category,
            cost=self.cost,
            rating=self.rating,
            image_url=self.image,
        )


class CartRowSchema(WireModel):
    """Cart row as returned by ``GET /cart`` and ``POST /cart``."""

    product_id: str = Field(alias="productId")
    qty: int = Field(gt=0)

    def to_domain(self) -> CartRow:
        return CartRow(product_id=self.product_id, qty=self.qty)


class AddressSchema(WireModel):
    """Address as returned by the ``/user/addresses`` endpoints."""

    id: str = Field(alias="_id")
    address: str

    def to_domain(self) -> Address:
        return Address(id=self.id, text=self.address)


class CheckoutResponse(WireModel):
    """Body of ``POST /cart/checkout``."""

    success: bool = False
    message: str | None = None


class LoginResponse(WireModel):
    """Body of a successful ``POST /auth/login``."""

    success: bool = True
    token: str
    username: str
    balance: Decimal

    @field_serializer("balance", when_used="json")
    def serialize_balance(self, balance: Decimal) -> int | float:
        return _json_number(balance)


class RegisterResponse(WireModel):
    """Body of a successful ``POST /auth/register``."""

    success: bool = True


class ErrorResponse(WireModel):
    """Failure body shared by all endpoints."""

    success: bool = False
    message: str | None = None


# ============================================================================
# Requests
# ============================================================================


class CartItemRequest(WireModel):
    """Body of ``POST /cart``."""

    product_id: str = Field(alias="productId")
    qty: int = Field(ge=0)


class AddressCreateRequest(WireModel):
    """Body of ``POST /user/addresses``."""

    address: str


class CheckoutRequest(WireModel):
    """Body of ``POST /cart/checkout``."""

    address_id: str = Field(alias="addressId")


class CredentialsRequest(WireModel):
    """Body of ``POST /auth/login`` and ``POST /auth/register``."""

    username: str
    password: str


# ============================================================================
# List Adapters
# ============================================================================


product_list_adapter = TypeAdapter(list[ProductSchema])
cart_list_adapter = TypeAdapter(list[CartRowSchema])
address_list_adapter = TypeAdapter(list[AddressSchema])


def parse_products(data: object) -> list[Product]:
    """Validate a product list body and convert it to domain products.

    Raises:
        pydantic.ValidationError: If the body is not a list of products.
    """
    return [p.to_domain() for p in product_list_adapter.validate_python(data)]


def parse_cart(data: object) -> list[CartRow]:
    """Validate a cart body and convert it to cart rows.

    Raises:
        pydantic.ValidationError: If the body is not a list of cart rows.
    """
    return [r.to_domain() for r in cart_list_adapter.validate_python(data)]


def parse_addresses(data: object) -> list[Address]:
    """Validate an address list body and convert it to addresses.

    Raises:
        pydantic.ValidationError: If the body is not a list of addresses.
    """
    return [a.to_domain() for a in address_list_adapter.validate_python(data)]
