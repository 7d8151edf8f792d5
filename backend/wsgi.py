# WSGI entrypoint: FLASK_APP=wsgi.py, or point any WSGI server at wsgi:app
from po_api import create_app

app = create_app()
