import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated; '*' allows any origin
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Static mini-app (index.html + assets)
    STATIC_FOLDER = os.environ.get('STATIC_FOLDER') or os.path.join(BASE_DIR, '..', 'public')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    # Piece used when a promoting move does not name one
    DEFAULT_PROMOTION = os.environ.get('DEFAULT_PROMOTION', 'q')
