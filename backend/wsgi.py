try:
    from backend.outsider.server import create_app
except ImportError:  # pragma: no cover
    from outsider.server import create_app

app, socketio = create_app()
