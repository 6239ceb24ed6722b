from board_realtime.main import create_app

app = create_app()
