import os
from decimal import Decimal

import pytest
from sqlmodel import select

from storefront.models import Product
from tests.conftest import API, PNG_BYTES, make_token

pytestmark = pytest.mark.asyncio


def product_form(**overrides):
    form = {
        "name": "Pixel 5",
        "description": "Google phone",
        "categoryid": "1",
        "brand": "Google",
        "price": "699.99",
        "img_src": "",
    }
    form.update(overrides)
    return form


async def test_create_product_with_png(client, seeded, admin_headers, image_store):
    response = await client.post(
        f"{API}/",
        data=product_form(),
        files={"myImage": ("pixel.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 201
    product_id = response.json()["productid"]
    assert isinstance(product_id, int)

    product = (await seeded.execute(select(Product).where(Product.id == product_id))).scalar_one()
    assert product.img_src is None
    assert product.img_name.startswith("myImage-")
    assert product.img_name.endswith(".png")
    assert product.price == Decimal("699.99")
    assert os.path.exists(image_store.path_for(product.img_name))


async def test_create_product_without_file(client, seeded, admin_headers):
    response = await client.post(
        f"{API}/",
        data=product_form(img_src="https://img.example/pixel.png"),
        headers=admin_headers,
    )

    assert response.status_code == 201
    product = (await seeded.execute(
        select(Product).where(Product.id == response.json()["productid"])
    )).scalar_one()
    assert product.img_name is None
    assert product.img_src == "https://img.example/pixel.png"


async def test_create_product_reports_every_invalid_field(client, seeded, admin_headers):
    response = await client.post(
        f"{API}/",
        data={"categoryid": "phones"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    params = [error["param"] for error in response.json()["errors"]]
    assert params == ["name", "description", "categoryid", "brand", "price"]


async def test_create_product_rejects_non_image(client, seeded, admin_headers, image_store):
    response = await client.post(
        f"{API}/",
        data=product_form(),
        files={"myImage": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["param"] == "myImage"
    assert response.json()["errors"][0]["msg"] == "Error: Images Only!"
    products = (await seeded.execute(select(Product))).scalars().all()
    assert len(products) == 3


async def test_create_product_rejects_mismatched_mime(client, seeded, admin_headers):
    response = await client.post(
        f"{API}/",
        data=product_form(),
        files={"myImage": ("photo.png", PNG_BYTES, "application/octet-stream")},
        headers=admin_headers,
    )

    assert response.status_code == 400


async def test_create_product_rejects_oversized_file(client, seeded, admin_headers, image_store):
    response = await client.post(
        f"{API}/",
        data=product_form(),
        files={"myImage": ("huge.jpg", b"\xff" * 1_000_001, "image/jpeg")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["msg"] == "File too large"
    products = (await seeded.execute(select(Product))).scalars().all()
    assert len(products) == 3
    assert not os.path.exists(image_store.directory) or os.listdir(image_store.directory) == []


async def test_create_product_discards_image_when_form_invalid(client, seeded, admin_headers, image_store):
    response = await client.post(
        f"{API}/",
        data=product_form(name=""),
        files={"myImage": ("pixel.gif", b"GIF89a", "image/gif")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert os.listdir(image_store.directory) == []


async def test_create_product_requires_admin(client, seeded, user_headers):
    response = await client.post(f"{API}/", data=product_form(), headers=user_headers)
    assert response.status_code == 403

    response = await client.post(f"{API}/", data=product_form())
    assert response.status_code in (401, 403)


async def test_create_product_rejects_bad_token(client, seeded):
    response = await client.post(
        f"{API}/",
        data=product_form(),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


async def test_search_by_keyword_only(client, seeded):
    response = await client.post(f"{API}/search", json={"brand": "", "keyword": "phone"})

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [2]


async def test_search_by_brand_only(client, seeded):
    response = await client.post(f"{API}/search", json={"brand": "apple", "keyword": ""})

    assert response.status_code == 200
    assert sorted(p["id"] for p in response.json()) == [2, 3]


async def test_search_by_brand_and_keyword(client, seeded):
    response = await client.post(f"{API}/search", json={"brand": "Apple", "keyword": "Mac"})

    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body] == [3]
    assert set(body[0]) == {"id", "name", "description", "categoryid", "brand", "price", "img_name", "img_src"}


async def test_search_replaces_encoded_space(client, seeded):
    response = await client.post(f"{API}/search", json={"brand": "", "keyword": "Book%20Air"})

    assert response.status_code == 200
    assert [p["name"] for p in response.json()] == ["Mac Book Air"]


async def test_search_with_no_terms_returns_empty_list(client, seeded):
    response = await client.post(f"{API}/search", json={"brand": "", "keyword": ""})

    assert response.status_code == 200
    assert response.json() == []


async def test_search_requires_both_fields(client, seeded):
    response = await client.post(f"{API}/search", json={"brand": "Apple"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["param"] == "keyword"


async def test_get_product_includes_category_name(client, seeded):
    response = await client.get(f"{API}/1")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Galaxy S20"
    assert body["categoryid"] == 1
    assert body["categoryname"] == "Phones"
    assert body["brand"] == "Samsung"
    assert Decimal(str(body["price"])) == Decimal("799")
    assert "img_src" not in body


async def test_get_missing_product_returns_null(client, seeded):
    response = await client.get(f"{API}/999")

    assert response.status_code == 200
    assert response.json() is None


async def test_get_product_with_non_integer_id_is_not_found(client, seeded):
    response = await client.get(f"{API}/abc")

    assert response.status_code == 200
    assert response.json() is None


async def test_delete_product_with_non_integer_id_is_no_content(client, seeded):
    response = await client.delete(f"{API}/abc")

    assert response.status_code == 204
    assert len((await client.get(f"{API}/")).json()) == 3


async def test_unknown_route_uses_error_envelope(client):
    response = await client.get(f"{API}/1/photos")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found", "success": False, "status_code": 404}


async def test_wrong_method_uses_error_envelope(client):
    response = await client.patch(f"{API}/1")

    assert response.status_code == 405
    assert response.json()["success"] is False
    assert response.json()["status_code"] == 405


async def test_list_products(client, seeded):
    response = await client.get(f"{API}/")

    assert response.status_code == 200
    assert sorted(p["id"] for p in response.json()) == [1, 2, 3]


async def test_delete_product(client, seeded):
    response = await client.delete(f"{API}/2")

    assert response.status_code == 204
    assert response.content == b""
    assert (await client.get(f"{API}/2")).json() is None


async def test_delete_missing_product_is_no_content(client, seeded):
    response = await client.delete(f"{API}/999")

    assert response.status_code == 204


async def test_delete_guard_when_configured(client, seeded, admin_headers, monkeypatch):
    from storefront.core.config import settings

    monkeypatch.setattr(settings, "require_admin_for_delete", True)

    assert (await client.delete(f"{API}/1")).status_code == 401
    user_token = {"Authorization": f"Bearer {make_token(1)}"}
    assert (await client.delete(f"{API}/1", headers=user_token)).status_code == 403
    assert (await client.delete(f"{API}/1", headers=admin_headers)).status_code == 204
