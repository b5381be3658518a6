"""
Tests for menu normalization: source resolution, defaulting rules,
ordering and failure handling.
"""

from unittest import mock

import pytest
from pymongo.errors import AutoReconnect

from menu import (
    normalize_menu, resolve_menu_source, distinct_categories, group_by_category,
    CategorizedMenu, EmbeddedItems, ExternalItems,
)
from models import Restaurant, MenuItem


def make_restaurant(**kwargs):
    return Restaurant(id='r1', name='Test Restaurant', **kwargs)


@pytest.fixture
def lookup():
    """External collection lookup that must usually stay unused"""
    return mock.Mock(return_value=[])


# ============================================================================
# SOURCE RESOLUTION
# ============================================================================

def test_resolve_prefers_menu_categories():
    """menuCategories wins over menuItems when both are present"""
    restaurant = make_restaurant(
        menu_categories=[{'name': 'A', 'items': []}],
        menu_items=[{'name': 'x'}],
    )

    assert isinstance(resolve_menu_source(restaurant), CategorizedMenu)


def test_resolve_embedded_items():
    restaurant = make_restaurant(menu_items=[{'name': 'x'}])

    assert isinstance(resolve_menu_source(restaurant), EmbeddedItems)


def test_resolve_empty_lists_fall_through_to_external():
    """Empty embedded lists count as absent"""
    restaurant = make_restaurant(menu_categories=[], menu_items=[])

    assert isinstance(resolve_menu_source(restaurant), ExternalItems)


def test_resolve_ignores_non_list_shapes():
    restaurant = make_restaurant(menu_categories={'name': 'A'}, menu_items='oops')

    assert isinstance(resolve_menu_source(restaurant), ExternalItems)


# ============================================================================
# CATEGORIZED MENUS
# ============================================================================

def test_categorized_menu_preserves_order(lookup):
    """Category order, then item order within each category"""
    restaurant = make_restaurant(menu_categories=[
        {'name': 'Starters', 'items': [{'name': 'Sambusa'}, {'name': 'Salad'}]},
        {'name': 'Mains', 'items': [{'name': 'Tibs'}]},
        {'name': 'Desserts', 'items': [{'name': 'Baklava'}, {'name': 'Cake'}]},
    ])

    items, categories = normalize_menu(restaurant, lookup)

    assert [item.name for item in items] == ['Sambusa', 'Salad', 'Tibs', 'Baklava', 'Cake']
    assert categories == ['Starters', 'Mains', 'Desserts']
    lookup.assert_not_called()


def test_categorized_menu_synthesizes_ids(lookup):
    """Items without an id get item-{category}-{item}"""
    restaurant = make_restaurant(menu_categories=[
        {'name': 'A', 'items': [{'name': 'a0'}, {'_id': 'keep-me', 'name': 'a1'}]},
        {'name': 'B', 'items': [{'name': 'b0'}]},
    ])

    items, _ = normalize_menu(restaurant, lookup)

    assert [item.id for item in items] == ['item-0-0', 'keep-me', 'item-1-0']


def test_categorized_menu_applies_defaults(lookup):
    """Missing fields get their documented defaults"""
    restaurant = make_restaurant(menu_categories=[{'name': 'Mains', 'items': [{}]}])

    items, _ = normalize_menu(restaurant, lookup)

    assert items == [MenuItem(
        id='item-0-0', restaurant_id='r1', name='Unnamed Item',
        description='', price=0, image='', category='Mains',
    )]


def test_categorized_menu_uses_group_name_over_item_category(lookup):
    restaurant = make_restaurant(menu_categories=[
        {'name': 'Drinks', 'items': [{'name': 'Tea', 'category': 'Food'}]},
    ])

    items, categories = normalize_menu(restaurant, lookup)

    assert items[0].category == 'Drinks'
    assert categories == ['Drinks']


def test_categorized_menu_unnamed_category(lookup):
    restaurant = make_restaurant(menu_categories=[{'items': [{'name': 'Mystery'}]}])

    items, categories = normalize_menu(restaurant, lookup)

    assert items[0].category == 'Uncategorized'
    assert categories == ['Uncategorized']


def test_categorized_menu_skips_malformed_entries(lookup):
    """Entries that are not category objects, or have no item list, emit nothing"""
    restaurant = make_restaurant(menu_categories=[
        'not a category',
        {'name': 'Empty'},
        {'name': 'Real', 'items': [{'name': 'Injera'}]},
    ])

    items, categories = normalize_menu(restaurant, lookup)

    assert [item.id for item in items] == ['item-2-0']
    assert categories == ['Real']


def test_empty_image_is_never_replaced(lookup):
    restaurant = make_restaurant(menu_categories=[
        {'name': 'A', 'items': [{'name': 'x', 'image': None}, {'name': 'y', 'image': 'y.jpg'}]},
    ])

    items, _ = normalize_menu(restaurant, lookup)

    assert [item.image for item in items] == ['', 'y.jpg']


# ============================================================================
# EMBEDDED AND EXTERNAL ITEMS
# ============================================================================

def test_embedded_items_attach_restaurant_and_defaults(lookup):
    restaurant = make_restaurant(menu_items=[
        {'_id': 'm1', 'name': 'Burger', 'price': 250, 'category': 'Mains', 'restaurantId': 'wrong'},
        {'name': 'Soda'},
    ])

    items, categories = normalize_menu(restaurant, lookup)

    assert [item.restaurant_id for item in items] == ['r1', 'r1']
    assert items[0].id == 'm1'
    assert items[1].id == 'item-1'
    assert items[1].category == 'Uncategorized'
    assert items[1].price == 0
    assert categories == ['Mains', 'Uncategorized']
    lookup.assert_not_called()


def test_external_items_queried_once(lookup):
    """Without an embedded menu the external collection is read exactly once"""
    lookup.return_value = [
        {'_id': 'e1', 'restaurantId': 'r1', 'name': 'Macchiato', 'price': 45, 'category': 'Coffee'},
        {'_id': 'e2', 'restaurantId': 'r1', 'name': 'Cake', 'category': 'Bakery'},
    ]
    restaurant = make_restaurant()

    items, categories = normalize_menu(restaurant, lookup)

    lookup.assert_called_once_with('r1')
    assert [(item.id, item.name, item.price) for item in items] == [
        ('e1', 'Macchiato', 45),
        ('e2', 'Cake', 0),
    ]
    assert categories == ['Coffee', 'Bakery']


def test_missing_restaurant_yields_empty_menu(lookup):
    """Absent or locked restaurants produce no items and no lookup"""
    assert normalize_menu(None, lookup) == ([], [])
    lookup.assert_not_called()


def test_lookup_failure_yields_empty_menu(lookup, caplog):
    """Store failures are logged and absorbed"""
    lookup.side_effect = AutoReconnect('connection lost')

    items, categories = normalize_menu(make_restaurant(), lookup)

    assert (items, categories) == ([], [])
    assert 'Error fetching menu items' in caplog.text


def test_price_coercion(lookup):
    restaurant = make_restaurant(menu_items=[
        {'name': 'a', 'price': '12.5'},
        {'name': 'b', 'price': '40'},
        {'name': 'c', 'price': 'free'},
        {'name': 'd', 'price': True},
        {'name': 'e', 'price': 9.99},
    ])

    items, _ = normalize_menu(restaurant, lookup)

    assert [item.price for item in items] == [12.5, 40, 0, 0, 9.99]


def test_non_string_categories_are_stringified(lookup):
    """Loosely-typed category fields still group and render"""
    restaurant = make_restaurant(menu_items=[
        {'name': 'Tea', 'category': ['Drinks']},
        {'name': 'Cake', 'category': {'en': 'Desserts'}},
        {'name': 'Soup', 'category': 7},
        {'name': 'Coffee', 'category': ['Drinks']},
    ])

    items, categories = normalize_menu(restaurant, lookup)

    assert [item.category for item in items] == [
        "['Drinks']", "{'en': 'Desserts'}", '7', "['Drinks']",
    ]
    assert categories == ["['Drinks']", "{'en': 'Desserts'}", '7']


def test_non_string_category_group_name(lookup):
    restaurant = make_restaurant(menu_categories=[
        {'name': {'en': 'Mains'}, 'items': [{'name': 'Tibs'}]},
    ])

    items, categories = normalize_menu(restaurant, lookup)

    assert items[0].category == "{'en': 'Mains'}"
    assert categories == ["{'en': 'Mains'}"]


def test_category_derivation_failure_yields_empty_menu(lookup, monkeypatch, caplog):
    def broken(items):
        raise TypeError('unhashable type')

    monkeypatch.setattr('menu.distinct_categories', broken)
    restaurant = make_restaurant(menu_items=[{'name': 'Tea', 'category': 'Drinks'}])

    assert normalize_menu(restaurant, lookup) == ([], [])
    assert 'Error fetching menu items' in caplog.text


# ============================================================================
# CATEGORY DERIVATION
# ============================================================================

def item(category):
    return MenuItem(id=category, restaurant_id='r1', category=category)


def test_distinct_categories_first_seen_order():
    """Not sorted: the order of a single left-to-right scan"""
    items = [item('Drinks'), item('Appetizers'), item('Drinks'), item('Zebra'), item('Appetizers')]

    assert distinct_categories(items) == ['Drinks', 'Appetizers', 'Zebra']


def test_group_by_category_keeps_item_order():
    items = [
        MenuItem(id='1', restaurant_id='r1', category='B'),
        MenuItem(id='2', restaurant_id='r1', category='A'),
        MenuItem(id='3', restaurant_id='r1', category='B'),
    ]

    grouped = group_by_category(items, ['B', 'A'])

    assert list(grouped) == ['B', 'A']
    assert [i.id for i in grouped['B']] == ['1', '3']
