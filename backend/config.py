import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8000'))
    # Deadline before the very first press of a match (seconds)
    FIRST_PRESS_TIMEOUT_SEC = float(os.environ.get('FIRST_PRESS_TIMEOUT_SEC', '30'))
    # Deadline after every accepted press (seconds)
    PRESS_TIMEOUT_SEC = float(os.environ.get('PRESS_TIMEOUT_SEC', '1'))
    # Rendezvous capacity of the matchmaking queue
    MATCHMAKING_QUEUE_SIZE = int(os.environ.get('MATCHMAKING_QUEUE_SIZE', '1'))
    # Start the pairing loop together with the app
    START_MATCHMAKER = True
