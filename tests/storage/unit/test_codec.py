from termstore.storage.codec import DEFAULT_SESSION_NAME, decode, encode


def test_encode_keeps_safe_characters_verbatim() -> None:
    assert encode("user@host.example-1_a+b") == "user@host.example-1_a+b"


def test_encode_escapes_unsafe_bytes_with_uppercase_hex() -> None:
    assert encode("my server/prod") == "my%20server%2Fprod"
    assert encode("a:b") == "a%3Ab"


def test_encode_escapes_each_utf8_byte() -> None:
    assert encode("café") == "caf%C3%A9"


def test_encode_none_uses_default_session_name() -> None:
    assert encode(None) == encode(DEFAULT_SESSION_NAME)
    assert encode(None) == "Default%20Settings"


def test_decode_reverses_encode() -> None:
    for name in ["Default Settings", "a%b", "100% done", "tab\there", "café", "%", "~/.ssh"]:
        assert decode(encode(name)) == name


def test_decode_copies_short_trailing_escape() -> None:
    assert decode("abc%") == "abc%"
    assert decode("abc%4") == "abc%4"


def test_decode_never_fails_on_malformed_escape() -> None:
    decoded = decode("x%zzy")

    assert decoded.startswith("x")
    assert decoded.endswith("y")
    assert len(decoded) == 3
