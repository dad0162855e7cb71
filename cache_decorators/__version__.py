"""Package version, taken from installed metadata or pyproject.toml."""

try:
    from importlib.metadata import version

    __version__ = version("cache-decorators")
except Exception:
    # source checkout without an install
    import tomllib
    from pathlib import Path

    try:
        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except Exception:
        __version__ = "0.0.0-dev"
