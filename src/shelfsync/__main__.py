"""Entry point for 'python -m shelfsync' command."""

from shelfsync.cli import main

if __name__ == "__main__":
    main()
