from redislockrun.cli import run

run()
