import os
from flask import Blueprint, current_app, jsonify, send_from_directory

main = Blueprint('main', __name__)


@main.route('/', defaults={'path': ''})
@main.route('/<path:path>')
def frontend(path):
    """Serve the built frontend; unknown paths get index.html for client routing."""
    if path == 'data' or path.startswith('data/'):
        return jsonify({'error': 'Not found'}), 404
    build_dir = os.path.abspath(current_app.config.get('FRONTEND_BUILD_DIR', './build'))
    if path and os.path.isfile(os.path.join(build_dir, path)):
        return send_from_directory(build_dir, path)
    if os.path.isfile(os.path.join(build_dir, 'index.html')):
        return send_from_directory(build_dir, 'index.html')
    return jsonify({'message': 'Welcome to the slam scoring server!'})
