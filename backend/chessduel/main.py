import os

from flask import Blueprint, abort, current_app, jsonify, send_from_directory

main = Blueprint('main', __name__)

def _static_folder():
    return os.path.abspath(current_app.config.get('STATIC_FOLDER') or '')

@main.route('/healthz')
def healthz():
    return 'ok', 200, {'Content-Type': 'text/plain; charset=utf-8'}

@main.route('/api/stats')
def stats():
    """Waiting connections and active sessions in this process."""
    service = current_app.extensions['match_service']
    return jsonify(service.stats())

@main.route('/')
def index():
    folder = _static_folder()
    if os.path.isfile(os.path.join(folder, 'index.html')):
        return send_from_directory(folder, 'index.html')
    return jsonify({'message': 'Welcome to the chess duel server!'})

@main.route('/<path:filename>')
def static_files(filename):
    folder = _static_folder()
    if not os.path.isdir(folder):
        abort(404)
    # send_from_directory rejects paths escaping the folder and 404s on missing files
    return send_from_directory(folder, filename)
