from .bootstrap import bootstrap_app
from .presentation import ConsoleController


def main() -> None:
    service = bootstrap_app()
    ConsoleController(service).run()


if __name__ == "__main__":
    main()
