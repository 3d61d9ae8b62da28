import pytest

from xosfs.xsm.word import Word, WordType


def test_store_int_round_trip():
    word = Word()
    word.store_int(-345)
    assert word.to_int() == -345
    assert word.value == "-345"


def test_int_constructor():
    assert Word(77).to_int() == 77


@pytest.mark.parametrize(
    "text, kind",
    [
        ("-12", WordType.INTEGER),
        ("+7", WordType.INTEGER),
        ("", WordType.INTEGER),
        ("12a", WordType.STRING),
        ("hello", WordType.STRING),
        ("1 2", WordType.STRING),
    ],
)
def test_unix_type(text, kind):
    assert Word(text).unix_type() is kind


def test_to_int_reads_leading_number():
    assert Word("  42xyz").to_int() == 42
    assert Word("abc").to_int() == 0


def test_store_str_truncates_to_word_size():
    word = Word()
    word.store_str("x" * 40)
    assert word.value == "x" * 16


def test_store_str_stops_at_nul():
    assert Word("ab\0cd").value == "ab"


def test_copy_from_is_independent():
    source = Word("MOV")
    target = Word()
    target.copy_from(source)
    source.store_str("ADD")
    assert target.value == "MOV"
    assert target != source


def test_raw_is_padded():
    raw = Word("hi").raw()
    assert len(raw) == 16
    assert raw.startswith(b"hi")
    assert raw[2:] == bytes(14)


def test_encrypt_sums_characters():
    word = Word("AB")
    word.encrypt()
    assert word.value == "131"


def test_encrypt_high_bytes_are_signed():
    word = Word("\xff")
    word.encrypt()
    assert word.to_int() == -1