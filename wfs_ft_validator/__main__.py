"""Allow ``python -m wfs_ft_validator URL``."""

from wfs_ft_validator.cli import run

if __name__ == "__main__":
    run()
