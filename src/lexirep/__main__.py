from lexirep.interface.cli import app

app()
