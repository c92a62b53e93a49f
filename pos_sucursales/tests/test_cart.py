import random

import pytest

from pos_sucursales.services.cart_service import (
    CART_SESSION_KEY,
    CartService,
    apply_quantity_delta,
    cart_total,
)


@pytest.fixture
def cart_service(container):
    return CartService(container.catalog_service, storage={})


def test_add_absent_product_starts_at_one(products):
    cart = apply_quantity_delta([], products[0], 3)
    assert len(cart) == 1
    assert cart[0]['id'] == 1
    assert cart[0]['qty'] == 1


def test_negative_delta_on_absent_product_is_noop(products):
    cart = apply_quantity_delta([], products[0], -1)
    assert cart == []
    cart = apply_quantity_delta([], products[0], 0)
    assert cart == []


def test_quantity_reaching_zero_removes_line(products):
    cart = apply_quantity_delta([], products[0], 1)
    cart = apply_quantity_delta(cart, products[1], 1)
    cart = apply_quantity_delta(cart, products[0], -1)
    assert [item['id'] for item in cart] == [2]


def test_line_order_is_insertion_order(products):
    cart = []
    for product in (products[2], products[0], products[1]):
        cart = apply_quantity_delta(cart, product, 1)
    cart = apply_quantity_delta(cart, products[0], 2)
    assert [item['id'] for item in cart] == [3, 1, 2]
    assert cart[1]['qty'] == 3


def test_random_delta_sequences_keep_invariants(products):
    rng = random.Random(1234)
    for _ in range(200):
        cart = []
        for _ in range(rng.randint(1, 40)):
            product = rng.choice(products)
            cart = apply_quantity_delta(cart, product, rng.randint(-3, 3))
            assert all(item['qty'] >= 1 for item in cart)
            assert len({item['id'] for item in cart}) == len(cart)
            expected = sum(item['price'] * item['qty'] for item in cart)
            assert cart_total(cart) == pytest.approx(expected, abs=0.005)


def test_service_adjust_snapshots_price(container, cart_service):
    assert cart_service.adjust_quantity(1, 1)['ok']

    # Cambio de precio en el catálogo después de agregar
    rows = container.product_repo.get_all()
    rows[0]['price'] = 99.0
    container.product_repo.save_all(rows)

    result = cart_service.adjust_quantity(1, 1)
    assert result['ok']
    line = result['carrito']['items'][0]
    assert line['qty'] == 2
    assert line['price'] == pytest.approx(5.5)
    assert result['carrito']['total'] == pytest.approx(11.0)


def test_service_unknown_product(cart_service):
    result = cart_service.adjust_quantity(999, 1)
    assert not result['ok']
    assert result['error'] == 'Producto no encontrado'
    assert cart_service.get_cart_items() == []


def test_service_rejects_non_numeric_input(cart_service):
    assert not cart_service.adjust_quantity('abc', 1)['ok']
    assert not cart_service.adjust_quantity(1, 'x')['ok']
    assert not cart_service.remove_item(None)['ok']


def test_service_negative_delta_on_absent_product_does_not_touch_catalog():
    storage = {}
    service = CartService(catalog_service=None, storage=storage)
    result = service.adjust_quantity(1, -1)
    assert result['ok']
    assert storage.get(CART_SESSION_KEY, []) == []


def test_service_remove_and_clear(cart_service):
    cart_service.adjust_quantity(1, 1)
    cart_service.adjust_quantity(1, 4)
    cart_service.adjust_quantity(3, 1)

    result = cart_service.remove_item(1)
    assert [item['id'] for item in result['carrito']['items']] == [3]

    result = cart_service.clear_cart()
    assert result['carrito']['items'] == []
    assert result['carrito']['total'] == 0


def test_get_cart_totals(cart_service):
    cart_service.adjust_quantity(2, 1)
    cart_service.adjust_quantity(2, 2)
    cart_service.adjust_quantity(4, 1)

    cart = cart_service.get_cart()
    assert cart['items_count'] == 2
    assert cart['total_items'] == 4
    assert cart['total'] == pytest.approx(4.25 * 3 + 0.8)
    assert cart['items'][0]['subtotal'] == pytest.approx(12.75)


def test_cart_line_keeps_only_checkout_fields(products):
    cart = apply_quantity_delta([], {**products[0], 'image_url': 'https://cdn.example.com/yerba.png'}, 1)
    assert cart == [{'id': 1, 'name': 'Yerba Mate 1kg', 'price': 5.5, 'qty': 1}]
