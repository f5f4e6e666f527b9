"""Allow ``python -m sdkdocs``."""

from sdkdocs.cli import app

if __name__ == "__main__":
    app(prog_name="sdkdocs")
