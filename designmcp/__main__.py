"""Entry point for running designmcp as a module (python -m designmcp)."""

from designmcp.cli.commands import app

if __name__ == "__main__":
    app()
