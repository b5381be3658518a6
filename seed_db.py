"""
Demo data for a fresh restaurant directory database.

One restaurant per menu shape (categorized, embedded items, separate
menuItems collection) plus a locked restaurant that must never be listed.
"""

from datetime import datetime, timedelta, timezone

from config import load_settings, configure_logging
from store import DocumentStore, RESTAURANTS, MENU_ITEMS


def demo_restaurants(now=None):
    now = now or datetime.now(timezone.utc)
    return [
        {
            'name': 'Yod Abyssinia',
            'logo': '',
            'location': 'Bole, Addis Ababa',
            'description': 'Traditional Ethiopian food with live cultural music every night.',
            'themeColor': '#B45309',
            'updatedAt': now,
            'menuCategories': [
                {
                    'name': 'Traditional',
                    'items': [
                        {'name': 'Doro Wot', 'description': 'Spicy chicken stew with boiled egg, served with injera.', 'price': 450},
                        {'name': 'Kitfo', 'description': 'Minced beef seasoned with mitmita and niter kibbeh.', 'price': 520.5},
                        {'name': 'Shiro', 'description': 'Chickpea stew simmered with berbere.', 'price': 220},
                    ],
                },
                {
                    'name': 'Drinks',
                    'items': [
                        {'name': 'Tej', 'description': 'Ethiopian honey wine.', 'price': 150},
                        {'name': 'Buna', 'description': 'Freshly roasted coffee ceremony.', 'price': 80},
                    ],
                },
            ],
        },
        {
            'name': 'Piassa Pizzeria',
            'logo': '',
            'location': 'Piassa, Addis Ababa',
            'description': 'Wood-fired pizza and pasta since 1960.',
            'themeColor': '#DC2626',
            'updatedAt': now - timedelta(days=1),
            'menuItems': [
                {'name': 'Margherita', 'description': 'Tomato, mozzarella, basil.', 'price': 380, 'category': 'Pizza'},
                {'name': 'Lasagna', 'description': 'Beef ragu and bechamel.', 'price': 420, 'category': 'Pasta'},
                {'name': 'Quattro Formaggi', 'description': 'Four cheeses.', 'price': 460, 'category': 'Pizza'},
            ],
        },
        {
            'name': 'Kaldi\'s Coffee',
            'logo': '',
            'location': 'Kazanchis, Addis Ababa',
            'description': 'Coffee, pastries and light meals.',
            'updatedAt': now - timedelta(days=2),
            'locked': False,
        },
        {
            'name': 'Hidden Kitchen',
            'logo': '',
            'location': 'Sarbet, Addis Ababa',
            'description': 'Not yet open to the public.',
            'updatedAt': now,
            'locked': True,
        },
    ]


def demo_menu_items(restaurant_id):
    return [
        {'restaurantId': restaurant_id, 'name': 'Macchiato', 'description': 'Espresso with a dash of milk.', 'price': 45, 'category': 'Coffee'},
        {'restaurantId': restaurant_id, 'name': 'Croissant', 'description': 'Butter croissant.', 'price': 60, 'category': 'Bakery'},
        {'restaurantId': restaurant_id, 'name': 'Spris', 'description': 'Layered juice.', 'price': 70.25, 'category': 'Juice'},
    ]


def seed_database(store):
    """Insert the demo data when the restaurants collection is empty.

    Returns the number of restaurants inserted.
    """
    restaurants = store.db[RESTAURANTS]
    if restaurants.count_documents({}) > 0:
        print("Database already initialized.")
        return 0

    print("--- Seeding demo restaurants ---")
    documents = demo_restaurants()
    result = restaurants.insert_many(documents)

    # The restaurant without an embedded menu reads from the menuItems collection
    for document, inserted_id in zip(documents, result.inserted_ids):
        if 'menuCategories' not in document and 'menuItems' not in document and not document.get('locked'):
            store.db[MENU_ITEMS].insert_many(demo_menu_items(str(inserted_id)))

    print(f"--- Seeded {len(result.inserted_ids)} restaurants ---")
    return len(result.inserted_ids)


if __name__ == '__main__':
    settings = load_settings()
    configure_logging(settings['LOG_LEVEL'])
    store = DocumentStore.from_settings(settings)
    try:
        seed_database(store)
    finally:
        store.close()
