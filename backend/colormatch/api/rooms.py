from flask import Blueprint, current_app, jsonify

from colormatch.services.games.views import room_summary

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room(room_code):
    """
    Returns the lobby summary of a live room: who is in it and whether
    the game has started. Hands and deck are never exposed here.
    """
    room = current_app.extensions['colormatch'].rooms.get(room_code)
    if room is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(room_summary(room)), 200
