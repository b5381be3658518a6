"""
Database Verification Script
Prints the databases and collections the directory can see, then every
visible restaurant with the menu it would render.
"""

from config import load_settings, configure_logging
from store import DocumentStore
from menu import normalize_menu


def verify_database(store):
    """Print the database summary and the normalized menus"""
    print("=" * 60)
    print("DATABASE VERIFICATION")
    print("=" * 60)

    summary = store.describe()
    print(f"\nCurrent database: {summary['currentDbName']}")
    for database in summary['databases']:
        marker = " (current)" if database['isCurrentDb'] else ""
        print(f"\n[OK] {database['name']}{marker}")
        for collection in database['collections']:
            print(f"  - {collection['name']}: {collection['documentCount']} documents")

    print("\n[OK] VISIBLE RESTAURANTS:")
    restaurants = store.list_restaurants()
    print(f"  Total: {len(restaurants)}")
    for restaurant in restaurants:
        items, categories = normalize_menu(restaurant, store.find_menu_items)
        print(f"  - {restaurant.name} ({restaurant.location}) - "
              f"{len(items)} items in {len(categories)} categories")
        for category in categories:
            print(f"      * {category}")

    print("\n" + "=" * 60)
    return summary


if __name__ == '__main__':
    settings = load_settings()
    configure_logging(settings['LOG_LEVEL'])
    store = DocumentStore.from_settings(settings)
    try:
        verify_database(store)
    finally:
        store.close()
