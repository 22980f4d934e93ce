import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Game rules
    HAND_SIZE = int(os.environ.get('HAND_SIZE', '7'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '5'))
    # Color used when a wild is played without a valid color choice
    DEFAULT_WILD_COLOR = os.environ.get('DEFAULT_WILD_COLOR', 'red')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    PORT = int(os.environ.get('PORT', '3000'))
