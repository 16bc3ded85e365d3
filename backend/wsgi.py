# backend/wsgi.py
from pizzadash import create_app

app = create_app()
