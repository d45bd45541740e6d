from zlaunch.cli import app

app(prog_name="zlaunch")
