"""Allow ``python -m fpb``."""

from fpb.cli.main import run

if __name__ == "__main__":
    run()
