"""
Passenger WSGI file for the gifselector Django application.

Used by Passenger (mod_passenger/Phusion Passenger) on shared hosting, which
imports this module and calls the 'application' callable for each request.
"""

import os
import sys

from django.core.wsgi import get_wsgi_application

# Passenger starts in the project directory but does not put it on sys.path
PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_DIR)

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gifselector.settings")

application = get_wsgi_application()
