import click

from simon import create_app, socketio

app = create_app()


@click.command()
@click.option('--host', default=None, help='Interface to bind (defaults to HOST config).')
@click.option('--port', default=None, type=int, help='Port to listen on (defaults to PORT config).')
@click.option('--debug/--no-debug', default=False)
def serve(host, port, debug):
    """Run the game server with Socket.IO enabled."""
    socketio.run(
        app,
        host=host or app.config['HOST'],
        port=port or app.config['PORT'],
        debug=debug,
        use_reloader=False,
        allow_unsafe_werkzeug=True,
    )


if __name__ == '__main__':
    serve()
