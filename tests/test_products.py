# tests/test_products.py
import uuid

from sqlmodel import select

from storefront.models.review import Review

PRODUCTS_URL = "/api/v1/products"


def review(client, headers, product_id, rating, comment=None):
    return client.post(
        f"{PRODUCTS_URL}/{product_id}/reviews",
        json={"rating": rating, "comment": comment},
        headers=headers,
    )


def test_catalog_is_public(client, make_product):
    make_product(name="Teapot")

    resp = client.get(PRODUCTS_URL)

    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["Teapot"]


def test_product_without_reviews_rates_zero(client, make_product):
    product = make_product()

    body = client.get(f"{PRODUCTS_URL}/{product.id}").json()

    assert body["average_rating"] == 0
    assert body["review_count"] == 0
    assert body["reviews"] == []


def test_average_rating_from_reviews(client, headers_for, make_product):
    product = make_product()
    for n, rating in enumerate((4, 5, 3)):
        headers = headers_for(uuid.uuid4(), f"reviewer{n}@example.com")
        assert review(client, headers, product.id, rating).status_code == 201

    detail = client.get(f"{PRODUCTS_URL}/{product.id}").json()
    listed = client.get(PRODUCTS_URL).json()

    assert detail["average_rating"] == 4.0
    assert detail["review_count"] == 3
    assert listed[0]["average_rating"] == 4.0
    assert listed[0]["review_count"] == 3


def test_review_carries_author_email(client, customer_headers, customer_id, make_product):
    product = make_product()

    resp = review(client, customer_headers, product.id, 5, comment="  Lovely glaze  ")

    assert resp.status_code == 201
    body = resp.json()
    assert body["user_id"] == str(customer_id)
    assert body["author_email"] == "alice@example.com"
    assert body["comment"] == "Lovely glaze"

    reviews = client.get(f"{PRODUCTS_URL}/{product.id}/reviews").json()
    assert [r["author_email"] for r in reviews] == ["alice@example.com"]


def test_review_rating_must_be_one_to_five(client, customer_headers, make_product):
    product = make_product()

    assert review(client, customer_headers, product.id, 0).status_code == 422
    assert review(client, customer_headers, product.id, 6).status_code == 422


def test_review_requires_sign_in(client, make_product):
    product = make_product()

    assert review(client, {}, product.id, 5).status_code == 401


def test_review_of_unknown_product_is_404(client, customer_headers, session):
    resp = review(client, customer_headers, uuid.uuid4(), 4)

    assert resp.status_code == 404
    assert session.exec(select(Review)).all() == []


def test_unknown_product_is_404(client):
    assert client.get(f"{PRODUCTS_URL}/{uuid.uuid4()}").status_code == 404


def test_filter_by_category_and_search(client, make_product):
    make_product(name="Oak Table", category="Furniture", description="Solid oak")
    make_product(name="Pine Shelf", category="Furniture", description="Light wood")
    make_product(name="Oak Spoon", category="Kitchen")

    furniture = client.get(PRODUCTS_URL, params={"category": "Furniture"}).json()
    assert sorted(p["name"] for p in furniture) == ["Oak Table", "Pine Shelf"]

    oak = client.get(PRODUCTS_URL, params={"search": "oak"}).json()
    assert sorted(p["name"] for p in oak) == ["Oak Spoon", "Oak Table"]

    both = client.get(PRODUCTS_URL, params={"category": "Furniture", "search": "light"}).json()
    assert [p["name"] for p in both] == ["Pine Shelf"]

    blank = client.get(PRODUCTS_URL, params={"category": "  "}).json()
    assert len(blank) == 3


def test_categories_are_distinct(client, make_product):
    make_product(category="Kitchen")
    make_product(category="Kitchen")
    make_product(category="Garden")
    make_product(category=None)

    assert client.get(f"{PRODUCTS_URL}/categories").json() == ["Garden", "Kitchen"]


def test_featured_is_capped(client, make_product):
    for n in range(10):
        make_product(name=f"Product {n}")

    assert len(client.get(f"{PRODUCTS_URL}/featured").json()) == 8


def test_related_products_share_category(client, make_product):
    product = make_product(name="Mug", category="Kitchen")
    for n in range(5):
        make_product(name=f"Bowl {n}", category="Kitchen")
    make_product(name="Rake", category="Garden")

    related = client.get(f"{PRODUCTS_URL}/{product.id}/related").json()

    assert len(related) == 4
    assert all(p["category"] == "Kitchen" for p in related)
    assert str(product.id) not in {p["id"] for p in related}
