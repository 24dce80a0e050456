import os

DEFAULT_CORS_ORIGINS = ','.join([
    'http://localhost:3000',
    'https://scribble0byajnas.vercel.app',
    'http://scribble.ajnasnb.com',
    'https://scribble.ajnasnb.com',
])

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Player slots per room (the admin does not take a slot)
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '8'))
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', DEFAULT_CORS_ORIGINS).split(',') if o.strip()]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    PORT = int(os.environ.get('PORT', '5000'))
    ENVIRONMENT = os.environ.get('FLASK_ENV', 'development')
    # Countdown workers re-check cancellation this often (seconds)
    TIMER_TICK_SEC = float(os.environ.get('TIMER_TICK_SEC', '0.25'))
