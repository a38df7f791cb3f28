import io
import logging

import pytest

import rc4kit.infra.config.file_io as file_io
from rc4kit.cli import main
from rc4kit.infra.logger import LOGGER_NAME
from rc4kit.libs.crypto import RC4


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run each command in an empty directory without user settings."""
    monkeypatch.chdir(tmp_path)
    user_dir = tmp_path / "user"
    monkeypatch.setattr(file_io, "SETTING_PATH", user_dir / "settings.json")
    monkeypatch.setattr(file_io, "SETTING_TOML_PATH", user_dir / "settings.toml")

    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield tmp_path
    logger.handlers[:] = handlers
    logger.setLevel(level)


def set_stdin(monkeypatch, data: bytes) -> None:
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(data)))


def test_cli_textbook_vector_hex_output(capsysbinary):
    assert main(["--key", "Key", "--drop", "0", "Plaintext"]) == 0
    assert capsysbinary.readouterr().out == b"bbf3 16e8 d940 af0a d3\n"


def test_cli_decrypts_hex_input_to_raw(capsysbinary):
    argv = ["-k", "Key", "-d", "0", "--input-hex", "--raw", "bbf3 16e8 d940 af0a d3"]
    assert main(argv) == 0
    assert capsysbinary.readouterr().out == b"Plaintext"


def test_cli_key_hex(capsysbinary):
    assert main(["--key-hex", "57696b69", "--drop", "0", "pedia"]) == 0
    assert capsysbinary.readouterr().out == b"1021 bf04 20\n"


def test_cli_default_drop_round_trip_via_stdin(monkeypatch, capsysbinary):
    key = b"tomatoes"
    pt = b"Shall i compare thee to a summer's day?"

    set_stdin(monkeypatch, pt)
    assert main(["--key", "tomatoes", "--raw"]) == 0
    ct = capsysbinary.readouterr().out
    assert ct == RC4(key).crypt(pt)

    set_stdin(monkeypatch, ct)
    assert main(["--key", "tomatoes", "--raw"]) == 0
    assert capsysbinary.readouterr().out == pt


def test_cli_hex_stdin(monkeypatch, capsysbinary):
    set_stdin(monkeypatch, b"1021 bf04 20\n")
    assert main(["--key", "Wiki", "--drop", "0", "--input-hex", "--raw"]) == 0
    assert capsysbinary.readouterr().out == b"pedia"


def test_cli_profile_from_settings(isolated_env, capsysbinary):
    (isolated_env / "settings.toml").write_text(
        "[general]\ndrop = 3072\n\n[profiles.textbook]\ndrop = 0\n",
        encoding="utf-8",
    )
    assert main(["--profile", "textbook", "--key", "Secret", "Attack at dawn"]) == 0
    assert capsysbinary.readouterr().out == b"45a0 1f64 5fc3 5b38 3552 544b 9bf5\n"


def test_cli_drop_flag_overrides_settings(isolated_env, capsysbinary):
    (isolated_env / "settings.toml").write_text(
        "[general]\ndrop = 768\n", encoding="utf-8"
    )
    assert main(["--key", "Key", "--drop", "0", "Plaintext"]) == 0
    assert capsysbinary.readouterr().out == b"bbf3 16e8 d940 af0a d3\n"


def test_cli_small_chunks_match_one_shot(isolated_env, monkeypatch, capsysbinary):
    (isolated_env / "settings.json").write_text(
        '{"general": {"chunk_size": 3}}', encoding="utf-8"
    )
    pt = bytes(range(100))
    set_stdin(monkeypatch, pt)

    assert main(["--key", "chunky", "--raw"]) == 0
    assert capsysbinary.readouterr().out == RC4(b"chunky").crypt(pt)


def test_cli_key_encoding_from_settings(isolated_env, capsysbinary):
    (isolated_env / "settings.toml").write_text(
        '[general]\nkey_encoding = "hex"\ndrop = 0\n', encoding="utf-8"
    )
    assert main(["--key", "4b6579", "Plaintext"]) == 0
    assert capsysbinary.readouterr().out == b"bbf3 16e8 d940 af0a d3\n"


def test_cli_empty_key_fails(capsysbinary):
    assert main(["--key", "", "data"]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert b"1 to 256 bytes" in captured.err


def test_cli_unknown_profile_fails(capsysbinary):
    assert main(["--profile", "nope", "--key", "Key", "data"]) == 1
    assert capsysbinary.readouterr().out == b""


def test_cli_missing_explicit_config_fails(isolated_env):
    assert main(["--config", str(isolated_env / "absent.toml"), "-k", "Key", "x"]) == 1


def test_cli_requires_key():
    with pytest.raises(SystemExit) as exc:
        main(["data"])
    assert exc.value.code == 2


def test_cli_rejects_negative_drop():
    with pytest.raises(SystemExit) as exc:
        main(["--key", "Key", "--drop", "-1", "data"])
    assert exc.value.code == 2


def test_cli_init_config(isolated_env):
    target = isolated_env / "conf" / "settings.toml"
    assert main(["--init-config", str(target)]) == 0
    assert "[profiles.textbook]" in target.read_text(encoding="utf-8")


def test_cli_init_config_into_user_dir_is_used(isolated_env, capsysbinary):
    target = isolated_env / "user" / "settings.toml"
    assert main(["--init-config", str(target)]) == 0
    target.write_text(
        target.read_text(encoding="utf-8").replace("drop = 3072", "drop = 0"),
        encoding="utf-8",
    )

    assert main(["--key", "Key", "Plaintext"]) == 0
    assert capsysbinary.readouterr().out == b"bbf3 16e8 d940 af0a d3\n"


@pytest.mark.parametrize(
    "settings",
    [
        '[general]\ndebug = "yes"\n',
        '[general.debug]\nlog_level = 10\n',
    ],
)
def test_cli_bad_debug_settings_exit_cleanly(isolated_env, capsysbinary, settings):
    (isolated_env / "settings.toml").write_text(settings, encoding="utf-8")

    assert main(["--key", "Key", "--drop", "0", "Plaintext"]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert b"Invalid" in captured.err


def test_cli_bad_profiles_table_exits_cleanly(isolated_env, capsysbinary):
    (isolated_env / "settings.toml").write_text(
        'profiles = "legacy"\n', encoding="utf-8"
    )

    assert main(["--profile", "legacy", "--key", "Key", "Plaintext"]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert b"Invalid 'profiles'" in captured.err


def test_cli_hex_stdin_in_small_chunks(isolated_env, monkeypatch, capsysbinary):
    (isolated_env / "settings.json").write_text(
        '{"general": {"chunk_size": 3, "drop": 0}}', encoding="utf-8"
    )
    set_stdin(monkeypatch, b"45a0 1f64 5fc3\n5b38 3552 544b 9bf5\n")

    assert main(["--key", "Secret", "--input-hex", "--raw"]) == 0
    assert capsysbinary.readouterr().out == b"Attack at dawn"


def test_cli_hex_output_in_small_chunks(isolated_env, monkeypatch, capsysbinary):
    (isolated_env / "settings.json").write_text(
        '{"general": {"chunk_size": 3, "drop": 0}}', encoding="utf-8"
    )
    set_stdin(monkeypatch, b"Attack at dawn")

    assert main(["--key", "Secret"]) == 0
    assert capsysbinary.readouterr().out == b"45a0 1f64 5fc3 5b38 3552 544b 9bf5\n"


def test_cli_hex_stdin_odd_digit_count_fails(monkeypatch, capsysbinary):
    set_stdin(monkeypatch, b"102 1b\n")
    assert main(["--key", "Wiki", "--drop", "0", "--input-hex", "--raw"]) == 1
