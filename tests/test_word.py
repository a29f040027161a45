import pytest

from exposkit.xsm.word import XSM_WORD_SIZE, Word, WordType


def test_integer_round_trip():
    word = Word()
    word.store_integer(-1234)
    assert word.integer() == -1234
    assert word.text == "-1234"


@pytest.mark.parametrize(
    "text, kind",
    [
        ("-12", WordType.INTEGER),
        ("+7", WordType.INTEGER),
        ("", WordType.INTEGER),
        ("+", WordType.INTEGER),
        ("12a", WordType.STRING),
        ("hello", WordType.STRING),
        ("1-2", WordType.STRING),
    ],
)
def test_kind(text, kind):
    assert Word(text).kind() == kind


def test_integer_reads_leading_number():
    assert Word("  42abc").integer() == 42
    assert Word("abc").integer() == 0


def test_store_string_truncates_to_word_size():
    word = Word("a" * 20)
    assert word.text == "a" * XSM_WORD_SIZE


def test_store_integer_keeps_tail_bytes():
    word = Word("abcdefgh")
    word.store_integer(7)
    assert word.text == "7"
    assert word.raw[2:8] == b"cdefgh"


def test_store_string_clears_tail_bytes():
    word = Word("abcdefgh")
    word.store_string("xy")
    assert word.raw == b"xy".ljust(XSM_WORD_SIZE, b"\0")


def test_copy_from_is_independent():
    source = Word("alpha")
    target = Word("beta")
    target.copy_from(source)
    source.store_string("gamma")
    assert target.text == "alpha"


def test_view_shares_buffer():
    buffer = bytearray(2 * XSM_WORD_SIZE)
    word = Word.view(buffer, XSM_WORD_SIZE)
    word.store_string("hi")
    assert buffer[XSM_WORD_SIZE:XSM_WORD_SIZE + 2] == b"hi"
    assert Word.view(buffer, XSM_WORD_SIZE).text == "hi"


def test_view_out_of_range():
    with pytest.raises(IndexError):
        Word.view(bytearray(XSM_WORD_SIZE), 8)


def test_encrypt_single_letter():
    word = Word("A")
    word.encrypt()
    assert word.text == "65"


def test_encrypt_ignores_order():
    left, right = Word("AB"), Word("BA")
    left.encrypt()
    right.encrypt()
    assert left.text == right.text
    assert left.kind() == WordType.INTEGER


def test_store_integer_wraps_to_32_bits():
    word = Word()
    word.store_integer(2**31)
    assert word.integer() == -(2**31)


def test_raw_setter_requires_full_word():
    with pytest.raises(ValueError):
        Word().raw = b"short"