from leitner.interface.cli import app

app()
