"""
utils/db.py
-----------------
This module initializes and manages the MongoDB connection
used for local settings, cached Odoo data and server-side sessions.
"""

import logging

from flask_pymongo import PyMongo

_logger = logging.getLogger(__name__)

# Create a global MongoDB instance
mongo = PyMongo()


def init_db_connection(app):
    """
    Initialize MongoDB connection with Flask app.
    Reads MONGO_URI from the app config.
    """
    mongo.init_app(app)
    _logger.info("MongoDB connection initialized (%s)", app.config.get("MONGO_URI"))
    return mongo
