"""Entry point for ``python -m dir_analyzer``."""

from dir_analyzer.app.cli import cli


def main() -> None:
    cli(prog_name="dir-analyzer")


if __name__ == "__main__":
    main()
