from typer import Typer

from tailwatch import __version__
from tailwatch.cli.build import build
from tailwatch.cli.watch.commands import watch
from tailwatch.utils import console

app = Typer(
    name="tailwatch",
    help="Run the TailwindCSS CLI once or as supervised watchers",
    no_args_is_help=True,
)

app.command(name="watch")(watch)
app.command(name="build")(build)


@app.command(name="version", help="Print the tailwatch version")
def version() -> None:
    console.print(f"tailwatch {__version__}")


if __name__ == "__main__":
    app()
