"""
Wordle Session Server - Main Entry Point

Initializes the game service and starts the Flask-SocketIO application.
"""

from . import create_app
from .config import Config, config
from .services.game_service import initialize_game_service
from .services.repository import InMemorySessionRepository, MongoSessionRepository
from .utils.game_logger import game_logger


def build_repository(config_class=Config):
    """MongoDB store when MONGO_URI is configured, in-memory store otherwise."""
    if config_class.MONGO_URI:
        repository = MongoSessionRepository(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
        repository.client.admin.command('ping')
        return repository
    return InMemorySessionRepository()


def main(config_name: str = 'default'):
    """Main function to initialize services and start the server."""
    config_class = config[config_name]
    repository = None
    try:
        print("Initializing services...")

        repository = build_repository(config_class)
        initialize_game_service(repository=repository)
        print(f"✓ Game service initialized ({type(repository).__name__})")

        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Wordle Session Server starting")

        print(f"\nStarting Wordle Session Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Wordle Session Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if repository is not None:
            repository.close()


if __name__ == '__main__':
    main()
