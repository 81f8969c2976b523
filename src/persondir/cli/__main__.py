"""Allow ``python -m persondir.cli``."""

from persondir.cli import run

if __name__ == "__main__":
    run()
