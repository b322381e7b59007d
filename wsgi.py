"""
WSGI entry point.

    gunicorn -c gunicorn.conf.py wsgi:application
"""
import os

from app import create_app
from config import ProductionConfig

config_name = os.environ.get('FLASK_ENV', 'production')

if config_name == 'production':
    # Refuse to start with development secrets
    ProductionConfig.validate()

application = create_app(config_name)
