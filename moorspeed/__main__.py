"""Module entry point: python -m moorspeed"""

from moorspeed.main import cli

if __name__ == "__main__":
    cli()
