import atexit
import logging

from flask import Flask, render_template, request, redirect, url_for, flash, abort, jsonify
from werkzeug.exceptions import NotFound

from config import load_settings, configure_logging
from store import DocumentStore
from menu import normalize_menu, group_by_category
from scroll_sync import client_settings
from utils import format_price, theme_palette

logger = logging.getLogger(__name__)

SITE_NAME = 'ETMenu'

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
}


def create_app(test_config=None, store=None):
    """Application factory.

    Without an injected `store`, a MongoDB client is built from the
    configuration; a missing MONGODB_URI stops startup with ConfigurationError.
    """
    app = Flask(__name__)
    app.config.from_mapping(load_settings())
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config['LOG_LEVEL'])

    if store is None:
        store = DocumentStore.from_settings(app.config)
        atexit.register(store.close)
    app.extensions['document_store'] = store

    register_template_helpers(app)
    register_routes(app)
    register_error_handlers(app)

    logger.info('Using database %r', store.db_name)
    return app


def get_store(app):
    return app.extensions['document_store']


# ============================================================================
# TEMPLATE HELPERS
# ============================================================================

def register_template_helpers(app):

    @app.template_filter('price')
    def price_filter(value):
        return format_price(value, app.config['CURRENCY_LABEL'])

    @app.context_processor
    def inject_site():
        return {'site_name': SITE_NAME}

    @app.after_request
    def add_response_headers(response):
        """Security headers, and no caching of lock state or menu content"""
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        response.headers['Cache-Control'] = 'no-store'
        return response


# ============================================================================
# PUBLIC ROUTES
# ============================================================================

def register_routes(app):

    @app.route('/')
    def index():
        """Homepage listing every visible restaurant"""
        query = request.args.get('q', '').strip()
        restaurants = get_store(app).list_restaurants(query or None)

        return render_template('index.html',
                               restaurants=[r.to_dict() for r in restaurants],
                               query=query)

    @app.route('/restaurant/<restaurant_id>')
    def restaurant_detail(restaurant_id):
        """A restaurant's menu, grouped by category"""
        store = get_store(app)
        restaurant = store.get_restaurant(restaurant_id)
        if restaurant is None:
            abort(404)

        menu_items, categories = normalize_menu(restaurant, store.find_menu_items)
        logger.info('Restaurant: %s, Menu Items: %d', restaurant.name, len(menu_items))

        theme = theme_palette(restaurant.theme_color, app.config['DEFAULT_THEME_COLOR'])
        menu_by_category = {
            category: [item.to_dict() for item in items]
            for category, items in group_by_category(menu_items, categories).items()
        }

        return render_template('restaurant.html',
                               restaurant=restaurant.to_dict(),
                               categories=categories,
                               menu_by_category=menu_by_category,
                               theme=theme,
                               scroll_settings=client_settings())

    @app.route('/contact', methods=['POST'])
    def contact():
        """Contact form; submissions are only logged"""
        name = request.form.get('name', '').strip()
        email = request.form.get('email', '').strip()
        message = request.form.get('message', '').strip()

        if not name or not email or not message:
            flash('Please fill in your name, email and message.', 'danger')
            return redirect(url_for('index', _anchor='contact'))

        logger.info('Contact form submitted: name=%r email=%r message=%r', name, email, message)
        flash('Message sent successfully!', 'success')
        return redirect(url_for('index', _anchor='contact'))

    # ========================================================================
    # DEBUG ROUTES
    # ========================================================================

    @app.route('/api/debug')
    def debug_database():
        """Databases, collections and document counts behind the directory.

        Off by default: answers 404 unless ENABLE_DEBUG_ENDPOINT is set.
        """
        if not app.config['ENABLE_DEBUG_ENDPOINT']:
            abort(404)

        try:
            summary = get_store(app).describe()
        except Exception as e:
            logger.exception('Error debugging database')
            return jsonify({'success': False, 'error': str(e) or 'Unknown error'}), 500

        return jsonify({'success': True, **summary})


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def register_error_handlers(app):

    @app.errorhandler(NotFound)
    def not_found(error):
        return render_template('not_found.html'), 404


# ============================================================================
# RUN APPLICATION
# ============================================================================

if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=5000, debug=True)
