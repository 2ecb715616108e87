from vocab_trainer.app import AppSettings, bootstrap

__all__ = ["main"]


def main() -> None:
    """Entry point: apply migrations and verify the configuration."""
    settings = AppSettings.from_env()
    bootstrap(settings)


if __name__ == "__main__":
    main()
