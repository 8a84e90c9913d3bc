from fiveinrow import create_app, socketio

app = create_app()


def main():
    try:
        socketio.run(app, host='0.0.0.0', port=int(app.config.get('PORT', 3000)))
    finally:
        app.extensions['fiveinrow']['sweeper'].stop()


if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    main()
