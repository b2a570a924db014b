import logging

from flask import Flask, current_app, jsonify, request

from .chatbot.base_core import ChatSession
from .chatbot.scheduler import Scheduler, ThreadingScheduler
from .config.config_manager import load_settings, setup_logging
from .error_handling import ChatCoreError, ErrorCategory

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.CONFIGURATION: 500,
}


def get_session() -> ChatSession:
    return current_app.extensions['supportbot']


def _submitted(message):
    if message is None:
        return jsonify({'error': 'No message provided'}), 400
    return jsonify({'message': message.to_dict(), 'status': get_session().status.value}), 202


# Create the Flask app around a single chat session
def create_app(settings=None, scheduler: Scheduler = None) -> Flask:
    settings = settings or load_settings()
    app = Flask(__name__)
    app.config['SUPPORTBOT_SETTINGS'] = settings
    app.extensions['supportbot'] = ChatSession.from_settings(
        settings, scheduler=scheduler or ThreadingScheduler()
    )

    @app.errorhandler(ChatCoreError)
    def handle_chat_error(error):
        return jsonify(error.to_dict()), STATUS_CODES.get(error.category, 400)

    # Route for handling incoming messages
    @app.route('/chat', methods=['POST'])
    def chat():
        data = request.get_json(silent=True) or {}
        message = data.get('message')

        if not isinstance(message, str):
            return jsonify({'error': 'No message provided'}), 400

        return _submitted(get_session().submit(message))

    @app.route('/quick-replies', methods=['GET'])
    def quick_replies():
        return jsonify({'quick_replies': list(get_session().quick_replies)})

    @app.route('/quick-replies/<int:index>', methods=['POST'])
    def quick_reply(index):
        try:
            message = get_session().submit_quick_reply(index)
        except IndexError:
            return jsonify({'error': f'No quick reply at index {index}'}), 404
        return _submitted(message)

    @app.route('/messages', methods=['GET'])
    def messages():
        return jsonify({'messages': [m.to_dict() for m in get_session().get_snapshot()]})

    @app.route('/status', methods=['GET'])
    def status():
        return jsonify(get_session().get_status())

    @app.route('/reset', methods=['POST'])
    def reset():
        greeting = get_session().reset_conversation()
        return jsonify({'message': greeting.to_dict()})

    @app.route('/analytics', methods=['GET'])
    def analytics():
        top_k = request.args.get('top_k')
        if top_k is not None:
            try:
                top_k = int(top_k)
            except ValueError:
                return jsonify({'error': 'top_k must be an integer'}), 400
            if top_k < 1:
                return jsonify({'error': 'top_k must be positive'}), 400

        return jsonify(get_session().get_analytics(top_k).to_dict())

    return app


if __name__ == '__main__':
    # Load settings
    settings = load_settings()
    setup_logging(settings.observability)

    app = create_app(settings)
    logger.info(f"Starting {settings.app_name} {settings.version}")

    # Start the Flask app
    app.run(debug=settings.debug_mode, port=5000)
