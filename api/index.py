# Serverless entrypoint: the platform's Python runtime serves this WSGI `app`.

from backend.gateway.server import create_app

app = create_app()
