from types import SimpleNamespace

import pytest

from services.cart import Cart, CartStore, resolve_spicy_level
from services.errors import NotFoundError


def menu_item(item_id, price, category="main", spicy_level=0):
    return SimpleNamespace(id=item_id, price=price, category=category, spicy_level=spicy_level)


AYAM = menu_item(1, 15000)
ES_TEH = menu_item(2, 5000, category="drink")


@pytest.mark.parametrize("calls", [1, 2, 5])
def test_repeated_add_accumulates_on_one_line(calls):
    cart = Cart()
    for _ in range(calls):
        cart.add_to_cart(AYAM, 2)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == calls
    assert cart.get_total_items() == calls


def test_same_item_different_spicy_levels_are_separate_lines():
    cart = Cart()
    cart.add_to_cart(AYAM, 1)
    cart.add_to_cart(AYAM, 4)

    assert [(line.menu_item.id, line.spicy_level) for line in cart.items] == [(1, 1), (1, 4)]
    assert cart.get_total_items() == 2


def test_total_price_sums_price_times_quantity():
    cart = Cart()
    cart.add_to_cart(AYAM, 0)
    cart.add_to_cart(AYAM, 0)
    cart.add_to_cart(ES_TEH, 0)

    assert cart.get_total_price() == 15000 * 2 + 5000
    assert cart.get_total_price() == sum(line.menu_item.price * line.quantity for line in cart.items)


def test_remove_drops_every_spicy_variant():
    cart = Cart()
    cart.add_to_cart(AYAM, 1)
    cart.add_to_cart(AYAM, 3)
    cart.add_to_cart(ES_TEH, 0)

    cart.remove_from_cart(AYAM.id)

    assert [line.menu_item.id for line in cart.items] == [ES_TEH.id]


def test_update_quantity_sets_all_lines_of_the_item():
    cart = Cart()
    cart.add_to_cart(AYAM, 1)
    cart.add_to_cart(AYAM, 3)

    cart.update_quantity(AYAM.id, 4)

    assert [line.quantity for line in cart.items] == [4, 4]
    assert cart.get_total_price() == 15000 * 8


@pytest.mark.parametrize("quantity", [0, -1])
def test_update_quantity_to_zero_or_less_removes_the_item(quantity):
    cart = Cart()
    cart.add_to_cart(AYAM, 0)
    cart.add_to_cart(ES_TEH, 0)

    cart.update_quantity(AYAM.id, quantity)

    assert [line.menu_item.id for line in cart.items] == [ES_TEH.id]


def test_clear_cart_empties_it():
    cart = Cart()
    cart.add_to_cart(AYAM, 0)
    cart.clear_cart()

    assert cart.is_empty()
    assert cart.get_total_price() == 0
    assert cart.get_total_items() == 0


def test_add_line_merges_with_matching_line():
    cart = Cart()
    cart.add_to_cart(AYAM, 2)
    cart.add_line(AYAM, 3, 2)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 4


def test_spicy_level_only_applies_to_main_dishes():
    assert resolve_spicy_level(ES_TEH, 5) == 0
    assert resolve_spicy_level(menu_item(3, 15000, spicy_level=2), None) == 2
    assert resolve_spicy_level(menu_item(3, 15000, spicy_level=2), 4) == 4


def test_cart_store_lookup():
    store = CartStore()
    cart = store.create()

    assert store.get(cart.id) is cart
    store.discard(cart.id)
    with pytest.raises(NotFoundError):
        store.get(cart.id)
    assert len(store) == 0


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_idle_carts_are_swept_on_create():
    clock = FakeClock()
    store = CartStore(idle_seconds=60, clock=clock)
    abandoned = store.create()
    active = store.create()

    clock.now = 50
    store.get(active.id)
    clock.now = 100
    store.create()

    assert len(store) == 2
    assert store.get(active.id) is active
    with pytest.raises(NotFoundError):
        store.get(abandoned.id)


def test_expired_cart_is_not_served_before_sweep():
    clock = FakeClock()
    store = CartStore(idle_seconds=60, clock=clock)
    cart = store.create()

    clock.now = 61
    with pytest.raises(NotFoundError):
        store.get(cart.id)
