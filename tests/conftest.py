from tests.fixtures import (  # noqa: F401
    captured_logger,
    mock_gm,
    quire_cli_runner,
    quire_file,
    quire_logger,
)
