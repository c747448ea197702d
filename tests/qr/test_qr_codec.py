import base64
import json

from school_attendance.qr.codec import QRTokenCodec


def _codec(secrets=("alpha-secret", "beta-secret")):
    return QRTokenCodec("unit-salt", lambda: list(secrets))


def _fields(payload: str) -> dict:
    return json.loads(base64.b64decode(payload))


def _pack(fields: dict) -> str:
    return base64.b64encode(json.dumps(fields).encode("utf-8")).decode("ascii")


def test_printed_code_resolves_to_the_secret():
    codec = _codec()
    assert codec.decode_and_verify(codec.encode_for_print("beta-secret")) == "beta-secret"


def test_printed_code_never_contains_the_raw_secret():
    codec = _codec()
    payload = codec.encode_for_print("alpha-secret")
    fields = _fields(payload)

    assert set(fields) == {"encoded_token", "checksum"}
    assert len(fields["encoded_token"]) == 16
    assert len(fields["checksum"]) == 8
    assert "alpha-secret" not in base64.b64decode(payload).decode("utf-8")


def test_tampered_checksum_is_rejected():
    codec = _codec()
    fields = _fields(codec.encode_for_print("alpha-secret"))
    fields["checksum"] = ("0" if fields["checksum"][0] != "0" else "1") + fields["checksum"][1:]

    assert codec.decode_and_verify(_pack(fields)) is None


def test_tampered_encoded_token_is_rejected():
    codec = _codec()
    fields = _fields(codec.encode_for_print("alpha-secret"))
    fields["encoded_token"] = fields["encoded_token"][::-1]

    assert codec.decode_and_verify(_pack(fields)) is None


def test_code_signed_with_another_salt_is_rejected():
    other = QRTokenCodec("other-salt", lambda: ["alpha-secret"])
    assert _codec().decode_and_verify(other.encode_for_print("alpha-secret")) is None


def test_valid_code_for_removed_student_resolves_to_none():
    payload = _codec().encode_for_print("gone-secret")
    assert _codec().decode_and_verify(payload) is None


def test_malformed_inputs_return_none_without_raising():
    codec = _codec()
    for scanned in ["", "   ", "not base64!!", base64.b64encode(b"not json").decode(), _pack({"encoded_token": 1, "checksum": "x"}), _pack(["a", "b"]), None]:
        assert codec.decode_and_verify(scanned) is None


def test_store_failure_during_resolution_returns_none():
    def broken():
        raise RuntimeError("db down")

    codec = QRTokenCodec("unit-salt", broken)
    assert codec.decode_and_verify(codec.encode_for_print("alpha-secret")) is None


def test_is_valid_format_checks_structure_only():
    codec = _codec()
    fields = _fields(codec.encode_for_print("alpha-secret"))
    fields["checksum"] = "ffffffff"

    assert codec.is_valid_format(_pack(fields)) is True
    assert codec.is_valid_format("garbage") is False
