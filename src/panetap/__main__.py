"""Command-line entry point for panetap."""

from .app import app


def main():
    """Run the panetap CLI."""
    app(prog_name="panetap")


if __name__ == "__main__":
    main()
