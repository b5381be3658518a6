"""
Menu normalization.

A restaurant's menu can be stored three ways: grouped under
`menuCategories`, as a flat embedded `menuItems` list, or as records in the
separate `menuItems` collection. The shape is resolved once per restaurant
and turned into one flat, ordered list of MenuItem objects.
"""

import logging

from models import MenuItem, UNCATEGORIZED

logger = logging.getLogger(__name__)


# ============================================================================
# MENU SOURCES
# ============================================================================

class CategorizedMenu:
    """Embedded `menuCategories`: [{name, items: [...]}, ...]"""

    def __init__(self, categories):
        self.categories = categories

    def items(self, restaurant_id, lookup_items):
        items = []
        for category_index, category in enumerate(self.categories):
            if not isinstance(category, dict):
                continue
            raw_items = category.get('items')
            if not isinstance(raw_items, list):
                continue
            for item_index, raw in enumerate(raw_items):
                items.append(MenuItem.from_raw(
                    raw,
                    restaurant_id,
                    fallback_id=f'item-{category_index}-{item_index}',
                    category=category.get('name') or UNCATEGORIZED,
                ))
        return items


class EmbeddedItems:
    """Embedded flat `menuItems` list"""

    def __init__(self, raw_items):
        self.raw_items = raw_items

    def items(self, restaurant_id, lookup_items):
        return [
            MenuItem.from_raw(raw, restaurant_id, fallback_id=f'item-{index}')
            for index, raw in enumerate(self.raw_items)
        ]


class ExternalItems:
    """Records kept in the separate menuItems collection"""

    def items(self, restaurant_id, lookup_items):
        return [
            MenuItem.from_raw(raw, restaurant_id, fallback_id=f'item-{index}')
            for index, raw in enumerate(lookup_items(restaurant_id))
        ]


def resolve_menu_source(restaurant):
    """Pick the one source used for this restaurant; first present wins"""
    if isinstance(restaurant.menu_categories, list) and restaurant.menu_categories:
        logger.info('Found menuCategories in restaurant document: %d categories',
                    len(restaurant.menu_categories))
        return CategorizedMenu(restaurant.menu_categories)
    if isinstance(restaurant.menu_items, list) and restaurant.menu_items:
        logger.info('Found %d menu items directly in restaurant document',
                    len(restaurant.menu_items))
        return EmbeddedItems(restaurant.menu_items)
    logger.info('No menu items found in restaurant document, checking menuItems collection')
    return ExternalItems()


# ============================================================================
# NORMALIZATION
# ============================================================================

def distinct_categories(items):
    """Category names in first-seen order"""
    seen = set()
    categories = []
    for item in items:
        if item.category not in seen:
            seen.add(item.category)
            categories.append(item.category)
    return categories


def normalize_menu(restaurant, lookup_items):
    """Return (items, categories) for a restaurant.

    `restaurant` is None when it could not be found or is locked.
    `lookup_items(restaurant_id)` returns raw records from the external
    collection and is only called when the restaurant embeds no menu.
    Failures are logged and produce an empty menu so the page still renders.
    """
    if restaurant is None:
        return [], []

    try:
        source = resolve_menu_source(restaurant)
        items = source.items(restaurant.id, lookup_items)
        categories = distinct_categories(items)
    except Exception:
        logger.exception('Error fetching menu items for restaurant %s', restaurant.id)
        return [], []

    return items, categories


def group_by_category(items, categories):
    """Map each category to its items, preserving item order"""
    grouped = {category: [] for category in categories}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped
