import re
import logging
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, DESCENDING
from pymongo.errors import PyMongoError

from config import ConfigurationError
from models import Restaurant, plain_document

logger = logging.getLogger(__name__)

RESTAURANTS = 'restaurants'
MENU_ITEMS = 'menuItems'
SYSTEM_DATABASES = ('admin', 'local', 'config')

# Restaurants are public only while the lock flag is absent or false
UNLOCKED_FILTER = {'$or': [{'locked': {'$exists': False}}, {'locked': False}]}


class DocumentStore:
    """Read access to the restaurant directory database.

    The store owns its MongoClient: build it once at process start and call
    close() at shutdown.
    """

    def __init__(self, client, db_name):
        self.client = client
        self.db_name = db_name

    @classmethod
    def from_settings(cls, settings):
        uri = settings.get('MONGODB_URI')
        if not uri:
            raise ConfigurationError('MONGODB_URI is not set; add it to the environment or .env')
        client = MongoClient(
            uri,
            maxPoolSize=settings.get('MONGODB_MAX_POOL_SIZE', 10),
            connectTimeoutMS=settings.get('MONGODB_CONNECT_TIMEOUT_MS', 5000),
            socketTimeoutMS=settings.get('MONGODB_SOCKET_TIMEOUT_MS', 45000),
        )
        return cls(client, settings['MONGODB_DB_NAME'])

    @property
    def db(self):
        return self.client[self.db_name]

    def close(self):
        self.client.close()

    # ------------------------------------------------------------------
    # Generic document access
    # ------------------------------------------------------------------

    def find_one(self, collection, filter):
        document = self.db[collection].find_one(filter)
        return plain_document(document) if document is not None else None

    def find(self, collection, filter, sort=None):
        cursor = self.db[collection].find(filter)
        if sort:
            cursor = cursor.sort(sort)
        return [plain_document(document) for document in cursor]

    # ------------------------------------------------------------------
    # Restaurant directory queries
    # ------------------------------------------------------------------

    def list_restaurants(self, query=None):
        """Unlocked restaurants, most recently updated first.

        `query` narrows the list to names containing it (case-insensitive).
        """
        filter = dict(UNLOCKED_FILTER)
        if query:
            filter['name'] = {'$regex': re.escape(query), '$options': 'i'}
        try:
            documents = self.find(RESTAURANTS, filter, sort=[('updatedAt', DESCENDING)])
        except PyMongoError:
            logger.exception('Error fetching restaurants')
            return []

        logger.info('Found %d unlocked restaurants', len(documents))
        return [Restaurant.from_document(document) for document in documents]

    def get_restaurant(self, restaurant_id):
        """The unlocked restaurant with this id, or None"""
        try:
            if not restaurant_id:
                raise InvalidId('empty id')
            filter = {'_id': ObjectId(restaurant_id)}
        except (InvalidId, TypeError):
            logger.warning('Malformed restaurant id %r', restaurant_id)
            return None

        filter.update(UNLOCKED_FILTER)
        try:
            document = self.find_one(RESTAURANTS, filter)
        except PyMongoError:
            logger.exception('Error fetching restaurant %s', restaurant_id)
            return None

        if document is None:
            logger.info('Restaurant %s not found or is locked', restaurant_id)
            return None
        return Restaurant.from_document(document)

    def find_menu_items(self, restaurant_id):
        """Raw records of the external menuItems collection, in store order"""
        documents = self.find(MENU_ITEMS, {'restaurantId': restaurant_id})
        logger.info('Found %d menu items in %s collection for restaurant %s',
                    len(documents), MENU_ITEMS, restaurant_id)
        return documents

    # ------------------------------------------------------------------
    # Debugging
    # ------------------------------------------------------------------

    def describe(self):
        """Every non-system database with its collections and document counts"""
        databases = []
        for name in self.client.list_database_names():
            if name in SYSTEM_DATABASES:
                continue
            database = self.client[name]
            collections = [
                {
                    'name': collection,
                    'documentCount': database[collection].count_documents({}),
                }
                for collection in sorted(database.list_collection_names())
            ]
            databases.append({
                'name': name,
                'isCurrentDb': name == self.db_name,
                'collections': collections,
            })
        return {
            'currentDbName': self.db_name,
            'databases': databases,
        }
