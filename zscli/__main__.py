"""Entry point for the zscli application."""

from zscli.main import cli

if __name__ == "__main__":
    cli()
