from bson import ObjectId

# ============================================================================
# DATA MODELS
# ============================================================================

UNNAMED_ITEM = 'Unnamed Item'
UNCATEGORIZED = 'Uncategorized'


def plain_document(value):
    """Recursively convert ObjectId values to strings so documents are JSON/template safe"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: plain_document(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain_document(item) for item in value]
    return value


def coerce_price(value):
    """Numeric price or 0; numeric strings are parsed"""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
        return int(number) if number.is_integer() else number
    return 0


def coerce_category(value):
    """Category label; missing becomes Uncategorized, non-strings are stringified"""
    if not value:
        return UNCATEGORIZED
    return value if isinstance(value, str) else str(value)


class Restaurant:
    """A restaurant document as read from the `restaurants` collection"""

    def __init__(self, id, name, logo='', location='', description='',
                 cover_photo=None, theme_color=None, locked=False,
                 updated_at=None, menu_categories=None, menu_items=None):
        self.id = id
        self.name = name
        self.logo = logo
        self.location = location
        self.description = description
        self.cover_photo = cover_photo
        self.theme_color = theme_color
        self.locked = locked
        self.updated_at = updated_at
        self.menu_categories = menu_categories
        self.menu_items = menu_items

    @classmethod
    def from_document(cls, document):
        doc = plain_document(document)
        return cls(
            id=str(doc.get('_id', '')),
            name=doc.get('name') or '',
            logo=doc.get('logo') or '',
            location=doc.get('location') or '',
            description=doc.get('description') or '',
            cover_photo=doc.get('coverPhoto'),
            theme_color=doc.get('themeColor'),
            locked=bool(doc.get('locked', False)),
            updated_at=doc.get('updatedAt'),
            menu_categories=doc.get('menuCategories'),
            menu_items=doc.get('menuItems'),
        )

    @property
    def is_visible(self):
        return not self.locked

    def to_dict(self):
        """Convert restaurant to dictionary for templates"""
        return {
            'id': self.id,
            'name': self.name,
            'logo': self.logo,
            'cover_photo': self.cover_photo,
            'location': self.location,
            'description': self.description,
            'theme_color': self.theme_color,
        }

    def __repr__(self):
        return f'<Restaurant {self.id} {self.name!r}>'


class MenuItem:
    """A normalized menu item, independent of the source shape it came from"""

    def __init__(self, id, restaurant_id, name=UNNAMED_ITEM, description='',
                 price=0, image='', category=UNCATEGORIZED):
        self.id = id
        self.restaurant_id = restaurant_id
        self.name = name
        self.description = description
        self.price = price
        self.image = image
        self.category = category

    @classmethod
    def from_raw(cls, raw, restaurant_id, fallback_id, category=None):
        """Apply the defaulting rules to a loosely-typed raw item.

        `category` overrides the item's own category field; it is used when
        the item comes from a named category group.
        """
        raw = plain_document(raw) if isinstance(raw, dict) else {}
        item_id = raw.get('_id') or raw.get('id') or fallback_id
        return cls(
            id=str(item_id),
            restaurant_id=str(restaurant_id),
            name=raw.get('name') or UNNAMED_ITEM,
            description=raw.get('description') or '',
            price=coerce_price(raw.get('price')),
            image=raw.get('image') or '',
            category=coerce_category(category if category is not None else raw.get('category')),
        )

    def to_dict(self):
        """Convert menu item to dictionary"""
        return {
            'id': self.id,
            'restaurant_id': self.restaurant_id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'image': self.image,
            'category': self.category,
        }

    def __eq__(self, other):
        if not isinstance(other, MenuItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<MenuItem {self.id} {self.name!r} ({self.category})>'
