from termstore.cli.main import main


def test_sessions_set_show_and_list(tmp_path, capsys) -> None:
    home = str(tmp_path)

    assert main(["--home", home, "sessions", "set", "prod box", "HostName=prod.example.org", "PortNumber=22"]) == 0
    assert main(["--home", home, "sessions", "list"]) == 0
    assert main(["--home", home, "sessions", "show", "prod box"]) == 0

    out = capsys.readouterr().out
    assert out == "prod box\nHostName=prod.example.org\nPortNumber=22\n"


def test_sessions_show_uses_resource_fallback(tmp_path, capsys) -> None:
    home = str(tmp_path)

    code = main(["--home", home, "-xrm", "pterm.TermWidth: 132", "sessions", "show", "absent", "TermWidth", "Font"])

    assert code == 0
    assert capsys.readouterr().out == "TermWidth=132\nFont (unset)\n"


def test_sessions_set_rejects_pair_without_separator(tmp_path, capsys) -> None:
    code = main(["--home", str(tmp_path), "sessions", "set", "s", "novalue"])

    assert code == 1
    assert "expected KEY=VALUE" in capsys.readouterr().err
    assert not (tmp_path / "sessions" / "s").exists()


def test_sessions_delete(tmp_path) -> None:
    home = str(tmp_path)
    main(["--home", home, "sessions", "set", "s", "a=1"])

    assert main(["--home", home, "sessions", "delete", "s"]) == 0
    assert not (tmp_path / "sessions" / "s").exists()


def test_hostkey_verify_exit_codes(tmp_path, capsys) -> None:
    home = str(tmp_path)

    assert main(["--home", home, "hostkey", "verify", "h", "22", "rsa", "KEY"]) == 1
    assert main(["--home", home, "hostkey", "store", "h", "22", "rsa", "KEY"]) == 0
    assert main(["--home", home, "hostkey", "verify", "h", "22", "rsa", "KEY"]) == 0
    assert main(["--home", home, "hostkey", "verify", "h", "22", "rsa", "OTHER"]) == 2

    out = capsys.readouterr().out
    assert out.splitlines() == ["no_record", "match", "mismatch"]


def test_hostkey_store_replace_retrusts_host(tmp_path, capsys) -> None:
    home = str(tmp_path)
    main(["--home", home, "hostkey", "store", "h", "22", "rsa", "OLD"])

    assert main(["--home", home, "hostkey", "store", "--replace", "h", "22", "rsa", "NEW"]) == 0
    assert main(["--home", home, "hostkey", "verify", "h", "22", "rsa", "NEW"]) == 0
    assert main(["--home", home, "hostkey", "list"]) == 0

    assert capsys.readouterr().out.splitlines()[-1] == "rsa@22:h NEW"


def test_hostkey_store_reports_invalid_record(tmp_path, capsys) -> None:
    code = main(["--home", str(tmp_path), "hostkey", "store", "bad host", "22", "rsa", "KEY"])

    assert code == 1
    assert "Invalid host key record" in capsys.readouterr().err


def test_hostkey_store_reports_unwritable_store(tmp_path, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    code = main(["--home", str(blocker), "hostkey", "store", "h", "22", "rsa", "KEY"])

    assert code == 1
    assert "cannot open host key file" in capsys.readouterr().err


def test_seed_size(tmp_path, capsys) -> None:
    (tmp_path / "randomseed").write_bytes(b"x" * 600)

    assert main(["--home", str(tmp_path), "seed", "size"]) == 0
    assert capsys.readouterr().out == "600\n"


def test_sessions_set_reports_unusable_sessions_directory(tmp_path, capsys) -> None:
    (tmp_path / "sessions").write_text("", encoding="utf-8")

    code = main(["--home", str(tmp_path), "sessions", "set", "s", "a=1"])

    assert code == 1
    assert "is not a directory" in capsys.readouterr().err
    assert [p.name for p in tmp_path.iterdir()] == ["sessions"]


def test_invalid_log_level_does_not_stop_commands(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("TERMSTORE_LOG_LEVEL", "verbose")

    assert main(["--home", str(tmp_path), "seed", "size"]) == 0
    assert capsys.readouterr().out == "0\n"
