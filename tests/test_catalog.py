from catalog import filter_products, find_product
from conftest import make_product

PRODUCTS = [
    make_product(id=1, name="Sugar 1kg", category_id=1),
    make_product(id=2, name="Brown Sugar", category_id=2),
    make_product(id=3, name="Maize Flour", category_id=1),
    make_product(id=4, name="Sugar Cane Juice", category_id=2, active=False),
]


def ids(products):
    return [p.id for p in products]


def test_no_filters_hides_inactive():
    assert ids(filter_products(PRODUCTS)) == [1, 2, 3]


def test_search_is_case_insensitive_substring():
    assert ids(filter_products(PRODUCTS, "SUGAR")) == [1, 2]


def test_search_and_category():
    assert ids(filter_products(PRODUCTS, "sugar", 2)) == [2]
    assert ids(filter_products(PRODUCTS, "", 1)) == [1, 3]


def test_filter_is_lazy_and_idempotent():
    result = filter_products(PRODUCTS, "sugar", 1)
    assert not isinstance(result, list)
    once = list(result)
    assert list(filter_products(once, "sugar", 1)) == once


def test_find_product():
    assert find_product(PRODUCTS, 3).name == "Maize Flour"
    assert find_product(PRODUCTS, 99) is None


def test_search_keeps_surrounding_whitespace():
    assert ids(filter_products(PRODUCTS, "sugar ")) == [1]
    assert ids(filter_products(PRODUCTS, " sugar")) == [2]
