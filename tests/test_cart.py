# tests/test_cart.py
import uuid
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from storefront.models.cart import Cart
from storefront.models.profile import Profile
from storefront.repositories.cart_repo import CartRepository
from storefront.services.cart_service import CartService

CART_URL = "/api/v1/cart"


def add(client, headers, product_id):
    return client.post(CART_URL, json={"product_id": str(product_id)}, headers=headers)


def test_cart_requires_sign_in(client, make_product):
    product = make_product()

    assert client.get(CART_URL).status_code == 401
    assert add(client, {}, product.id).status_code == 401


def test_new_user_has_empty_cart(client, customer_headers):
    resp = client.get(CART_URL, headers=customer_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["total_quantity"] == 0
    assert Decimal(str(body["total_price"])) == Decimal("0")


def test_adding_same_product_twice_merges_lines(client, customer_headers, make_product):
    product = make_product(price="10.00", stock=5)

    add(client, customer_headers, product.id)
    resp = add(client, customer_headers, product.id)

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["items"]) == 1
    assert body["items"][0]["id"] == str(product.id)
    assert body["items"][0]["quantity"] == 2
    assert Decimal(str(body["items"][0]["line_total"])) == Decimal("20.00")
    assert body["total_quantity"] == 2
    assert Decimal(str(body["total_price"])) == Decimal("20.00")


def test_lines_keep_insertion_order(client, customer_headers, make_product):
    first = make_product(name="First")
    second = make_product(name="Second")

    add(client, customer_headers, first.id)
    add(client, customer_headers, second.id)
    resp = add(client, customer_headers, first.id)

    assert [it["id"] for it in resp.json()["items"]] == [str(first.id), str(second.id)]


def test_add_unknown_product_is_404(client, customer_headers):
    resp = add(client, customer_headers, uuid.uuid4())

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Product not found"


def test_add_out_of_stock_product_is_rejected(client, customer_headers, make_product):
    product = make_product(stock=0)

    resp = add(client, customer_headers, product.id)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Product is out of stock"


def test_cart_persists_per_user(client, customer_headers, make_product, session, customer_id):
    product = make_product()
    add(client, customer_headers, product.id)

    session.expire_all()
    cart = session.exec(select(Cart).where(Cart.user_id == customer_id)).one()
    assert cart.items[0]["id"] == str(product.id)
    assert cart.items[0]["price"] == "10.00"
    assert cart.version == 1


def test_set_quantity(client, customer_headers, make_product):
    product = make_product(price="2.50")
    add(client, customer_headers, product.id)

    resp = client.patch(
        f"{CART_URL}/{product.id}", json={"quantity": 4}, headers=customer_headers
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["items"][0]["quantity"] == 4
    assert Decimal(str(body["total_price"])) == Decimal("10.00")


def test_set_quantity_below_one_is_ignored(client, customer_headers, make_product):
    product = make_product()
    add(client, customer_headers, product.id)
    add(client, customer_headers, product.id)

    resp = client.patch(
        f"{CART_URL}/{product.id}", json={"quantity": 0}, headers=customer_headers
    )

    assert resp.status_code == 200
    assert resp.json()["items"][0]["quantity"] == 2


def test_set_quantity_of_missing_line_is_404(client, customer_headers, make_product):
    product = make_product()

    resp = client.patch(
        f"{CART_URL}/{product.id}", json={"quantity": 3}, headers=customer_headers
    )

    assert resp.status_code == 404


def test_remove_item(client, customer_headers, make_product):
    keep = make_product(name="Keep")
    drop = make_product(name="Drop")
    add(client, customer_headers, keep.id)
    add(client, customer_headers, drop.id)

    resp = client.delete(f"{CART_URL}/{drop.id}", headers=customer_headers)

    assert resp.status_code == 200
    assert [it["id"] for it in resp.json()["items"]] == [str(keep.id)]

    again = client.delete(f"{CART_URL}/{drop.id}", headers=customer_headers)
    assert again.status_code == 404


def test_clear_cart(client, customer_headers, make_product):
    product = make_product()
    add(client, customer_headers, product.id)

    resp = client.delete(CART_URL, headers=customer_headers)

    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert client.get(CART_URL, headers=customer_headers).json()["items"] == []


# ---- version-checked writes ----


class RacingCartRepository:
    """
    In-memory cart store where another writer lands a change right
    before each of our first `races` writes.
    """

    def __init__(self, races: int, rival_line: dict):
        self.races = races
        self.rival_line = rival_line
        self.row = None

    def _snapshot(self):
        return SimpleNamespace(id=self.row.id, items=list(self.row.items), version=self.row.version)

    def get_for_user(self, session, user_id):
        return self._snapshot() if self.row else None

    def create_for_user(self, session, user_id):
        self.row = SimpleNamespace(id=uuid.uuid4(), items=[], version=0)
        return self._snapshot()

    def swap_items(self, session, cart, items):
        if self.races:
            self.races -= 1
            self.row.items = self.row.items + [self.rival_line]
            self.row.version += 1
        if cart.version != self.row.version:
            return False
        self.row.items = items
        self.row.version += 1
        return True


def _rival_line():
    return {"id": str(uuid.uuid4()), "name": "Rival", "price": "1.00", "image": None, "quantity": 1}


def _service(cart_repo, product):
    product_repo = MagicMock()
    product_repo.get_by_id.return_value = product
    return CartService(cart_repo, product_repo)


def test_conflicting_write_is_retried_without_losing_the_other_change():
    product = SimpleNamespace(
        id=uuid.uuid4(), name="Mug", price=Decimal("10.00"), image=None, stock=5
    )
    rival = _rival_line()
    repo = RacingCartRepository(races=1, rival_line=rival)
    session = MagicMock()

    summary = _service(repo, product).add_to_cart(session, uuid.uuid4(), product.id)

    assert [str(it.id) for it in summary.items] == [rival["id"], str(product.id)]
    assert session.rollback.call_count == 1
    assert session.commit.call_count == 1


def test_write_gives_up_after_repeated_conflicts():
    product = SimpleNamespace(
        id=uuid.uuid4(), name="Mug", price=Decimal("10.00"), image=None, stock=5
    )
    repo = RacingCartRepository(races=100, rival_line=_rival_line())
    session = MagicMock()

    with pytest.raises(HTTPException) as exc:
        _service(repo, product).add_to_cart(session, uuid.uuid4(), product.id)

    assert exc.value.status_code == 409
    session.commit.assert_not_called()


def test_swap_items_rejects_stale_version(session, customer_id):
    session.add(Profile(id=customer_id, email="alice@example.com"))
    session.commit()
    repo = CartRepository()
    cart = repo.create_for_user(session, customer_id)
    stale = SimpleNamespace(id=cart.id, version=cart.version)

    assert repo.swap_items(session, cart, []) is True
    session.commit()
    assert repo.swap_items(session, stale, []) is False


def test_store_failure_on_add_is_503(client, customer_headers, make_product, monkeypatch, caplog):
    product = make_product()

    def lose_connection(self, session, cart, items):
        raise OperationalError("UPDATE carts", {}, Exception("connection lost"))

    monkeypatch.setattr(CartRepository, "swap_items", lose_connection)

    resp = add(client, customer_headers, product.id)

    assert resp.status_code == 503
    assert resp.json()["detail"] == "Failed to add item to cart"
    assert "Cart write failed" in caplog.text
    assert client.get(CART_URL, headers=customer_headers).json()["items"] == []
