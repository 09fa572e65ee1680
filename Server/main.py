"""
Wordle Engine Server - Main Entry Point

This is the main entry point for the Wordle engine server.
It builds the Flask-SocketIO application and starts serving.
"""

from wordle_engine import create_app
from wordle_engine.config import WORD_LIST, get_config
from wordle_engine.services.game_service import get_game_service
from wordle_engine.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Creating Flask application...")
        settings = get_config()
        app, socketio = create_app(settings)
        print(f"✓ Flask application created successfully ({settings.__name__})")

        game_service = get_game_service()
        print(f"✓ Game service initialized ({len(WORD_LIST)} target words)")
        print(f"  History backend: {game_service.history_store.backend} "
              f"(namespace '{game_service.history_store.namespace}')")
        print(f"  Scoring policy: {game_service.scoring_policy.value}")

        game_logger.logger.info(
            f"Wordle Engine Starting - history backend {game_service.history_store.backend}, "
            f"scoring policy {game_service.scoring_policy.value}"
        )

        print(f"\nStarting Wordle Engine Server on {settings.HOST}:{settings.PORT}")
        print(f"Debug mode: {settings.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=settings.HOST, port=settings.PORT, debug=settings.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Wordle Engine shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
