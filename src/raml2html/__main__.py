"""Module entrypoint to keep the CLI runnable via ``python -m raml2html``."""

from raml2html.cli.main import main

if __name__ == "__main__":  # pragma: no cover - thin wrapper
    main()
