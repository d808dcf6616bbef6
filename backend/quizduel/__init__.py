from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from quizduel.config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, timers=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', '*')
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from quizduel.services.duels.questions import load_question_bank
    from quizduel.services.duels.service import DuelService
    from quizduel.services.duels.timers import SocketIOTimers
    from quizduel.socketio_events import make_dispatcher, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    questions = load_question_bank(flask_app.config.get('QUESTION_BANK_PATH'))
    flask_app.extensions['duels'] = DuelService(
        questions,
        timers if timers is not None else SocketIOTimers(socketio),
        dispatch=make_dispatcher(namespace),
        round_duration=float(flask_app.config.get('ROUND_DURATION_SEC', 10)),
        grace_duration=float(flask_app.config.get('GRACE_DURATION_SEC', 1)),
        logger=flask_app.logger,
    )
    flask_app.logger.info(f"[startup] questions={len(questions)} namespace={namespace}")

    from quizduel.main import main
    flask_app.register_blueprint(main)

    from quizduel.api.duels import duels
    flask_app.register_blueprint(duels, url_prefix='/api')

    # Register Socket.IO event handlers on the shared socketio instance
    register_socketio_handlers(namespace)

    @click.command('questions')
    def questions_command():
        """Prints the loaded question bank."""
        for number, item in enumerate(questions, start=1):
            click.echo(f"{number}. {item.prompt}")
            for option in item.options:
                marker = '*' if option == item.answer else ' '
                click.echo(f"   {marker} {option}")

    flask_app.cli.add_command(questions_command)

    return flask_app
