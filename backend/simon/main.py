from flask import Blueprint, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    # The game page; everything interesting happens on the /ws namespace
    return current_app.send_static_file('game.html')
