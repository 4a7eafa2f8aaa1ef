"""Allow running the CLI with `python -m atlas_local`."""

from atlas_local.cli.main import main

if __name__ == "__main__":
    main()
