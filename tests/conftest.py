"""Shared helpers for vaultwatch tests."""

import pytest

T0 = "2020-07-08T19:58:26.841778689+01:00"


def log_line(
    message: str,
    time: str = T0,
    category: str = "INFO",
    source: str = "[src/vault.rs:114]",
) -> str:
    """Build a logfile line in the vault format."""
    return f"{category} {time} {source} {message}"


GET_RESPONSE = (
    "Responded to our data handlers with: Response { response: "
    "Response::GetSuccess, message_id: 1 }"
)
PUT_RESPONSE = (
    "Responded to our data handlers with: Response { response: "
    "Response::Mutation(Ok(())), message_id: 2 }"
)


@pytest.fixture
def vault_log(tmp_path):
    """A small vault logfile covering start, activity and state lines."""
    path = tmp_path / "vault.log"
    path.write_text(
        "\n".join([
            "Running safe-vault v0.24.0",
            log_line("starting up"),
            log_line("Initializing new Vault as Infant"),
            log_line(GET_RESPONSE, time="2020-07-08T19:59:01.000000000+01:00"),
            log_line(PUT_RESPONSE, time="2020-07-08T19:59:02.000000000+01:00"),
            log_line("No. of Elders: 7", time="2020-07-08T20:01:00.000000000+01:00"),
            "some unrelated text",
        ])
        + "\n"
    )
    return path
