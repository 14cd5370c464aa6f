"""In-memory state for the storefront simulator.

Holds users, sessions, carts and addresses for the simulated backend.
Business rule violations raise ``SimulatorError`` carrying the HTTP
status and message the API returns.
"""

import secrets
from dataclasses import dataclass, field
from decimal import Decimal

import structlog

from storefront.infrastructure.config import settings
from storefront.infrastructure.schemas import AddressSchema, CartRowSchema, ProductSchema

logger = structlog.get_logger()


class SimulatorError(Exception):
    """A failure the simulated API reports as ``{success: false, message}``."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


DEFAULT_PRODUCTS: list[ProductSchema] = [
    ProductSchema(
        _id="KCRwjF7lN97HnEaY",
        name="Basketball",
        category="Sports",
        cost=Decimal("48"),
        rating=5,
        image="https://example.com/images/basketball.png",
    ),
    ProductSchema(
        _id="BW0jAAeDJmlZCF8i",
        name="Tan Leatherette Weekender Duffle",
        category="Fashion",
        cost=Decimal("150"),
        rating=4,
        image="https://example.com/images/duffle.png",
    ),
    ProductSchema(
        _id="PmInA797xJhMIPti",
        name="Stylish Sunglasses",
        category="Fashion",
        cost=Decimal("49"),
        rating=4,
        image="https://example.com/images/sunglasses.png",
    ),
    ProductSchema(
        _id="TwMM4OAhmK0VQ93S",
        name="Wireless Headphones",
        category="Electronics",
        cost=Decimal("120"),
        rating=3,
        image="https://example.com/images/headphones.png",
    ),
    ProductSchema(
        _id="a4sLtEcMpzabRyfx",
        name="Smart Watch",
        category="Electronics",
        cost=Decimal("250"),
        rating=4,
        image="https://example.com/images/watch.png",
    ),
]


@dataclass
class SimulatedUser:
    """A registered user of the simulator."""

    username: str
    password: str
    balance: Decimal
    cart: list[CartRowSchema] = field(default_factory=list)
    addresses: list[AddressSchema] = field(default_factory=list)


class SimulatorStore:
    """In-memory backend state."""

    def __init__(
        self,
        products: list[ProductSchema] | None = None,
        starting_balance: Decimal = Decimal("5000"),
    ) -> None:
        self.products = list(DEFAULT_PRODUCTS if products is None else products)
        self.starting_balance = starting_balance
        self._users: dict[str, SimulatedUser] = {}
        self._tokens: dict[str, str] = {}

    @property
    def user_count(self) -> int:
        return len(self._users)

    # =========================================================================
    # Users
    # =========================================================================

    def register(self, username: str, password: str) -> SimulatedUser:
        if username in self._users:
            raise SimulatorError(400, "Username is already taken")
        user = SimulatedUser(username=username, password=password, balance=self.starting_balance)
        self._users[username] = user
        logger.info("Simulator user registered", username=username)
        return user

    def login(self, username: str, password: str) -> tuple[str, SimulatedUser]:
        user = self._users.get(username)
        if user is None:
            raise SimulatorError(400, "Username does not exist")
        if user.password != password:
            raise SimulatorError(400, "Password is incorrect")
        token = secrets.token_hex(16)
        self._tokens[token] = username
        return token, user

    def authenticate(self, authorization: str | None) -> SimulatedUser:
        if not authorization or not authorization.startswith("Bearer "):
            raise SimulatorError(401, "Protected route, Oauth2 Bearer token not found")
        username = self._tokens.get(authorization.removeprefix("Bearer ").strip())
        if username is None:
            raise SimulatorError(401, "Invalid or expired token")
        return self._users[username]

    # =========================================================================
    # Products
    # =========================================================================

    def get_product(self, product_id: str) -> ProductSchema | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def search(self, value: str) -> list[ProductSchema]:
        needle = value.lower()
        matches = [
            p for p in self.products
            if needle in p.name.lower() or needle in p.category.lower()
        ]
        if not matches:
            raise SimulatorError(404, "No products found")
        return matches

    # =========================================================================
    # Cart
    # =========================================================================

    def set_cart_item(self, user: SimulatedUser, product_id: str, qty: int) -> list[CartRowSchema]:
        if self.get_product(product_id) is None:
            raise SimulatorError(404, "Product doesn't exist")

        rows = [row for row in user.cart if row.product_id != product_id]
        if qty > 0:
            existing = next((i for i, row in enumerate(user.cart) if row.product_id == product_id), None)
            new_row = CartRowSchema(product_id=product_id, qty=qty)
            if existing is None:
                rows.append(new_row)
            else:
                rows.insert(existing, new_row)
        user.cart = rows
        return user.cart

    def checkout(self, user: SimulatedUser, address_id: str) -> Decimal:
        if not user.cart:
            raise SimulatorError(400, "Cart is empty")
        if not any(a.id == address_id for a in user.addresses):
            raise SimulatorError(400, "Address not set")

        total = Decimal("0")
        for row in user.cart:
            product = self.get_product(row.product_id)
            if product is not None:
                total += product.cost * row.qty
        if total > user.balance:
            raise SimulatorError(400, "Wallet balance not sufficient to place order")

        user.balance -= total
        user.cart = []
        logger.info("Simulator order placed", username=user.username, total=str(total))
        return total

    # =========================================================================
    # Addresses
    # =========================================================================

    def add_address(self, user: SimulatedUser, text: str) -> list[AddressSchema]:
        if len(text.strip()) < 20:
            raise SimulatorError(400, "Address should be greater than 20 characters")
        user.addresses.append(AddressSchema(_id=secrets.token_hex(8), address=text))
        return user.addresses

    def delete_address(self, user: SimulatedUser, address_id: str) -> list[AddressSchema]:
        remaining = [a for a in user.addresses if a.id != address_id]
        if len(remaining) == len(user.addresses):
            raise SimulatorError(404, "Address to delete was not found")
        user.addresses = remaining
        return user.addresses


_simulator_store: SimulatorStore | None = None


def get_simulator_store() -> SimulatorStore:
    """Get or create the simulator store instance."""
    global _simulator_store
    if _simulator_store is None:
        _simulator_store = SimulatorStore(
            starting_balance=Decimal(settings.simulator_starting_balance),
        )
    return _simulator_store
