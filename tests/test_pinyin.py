from hanzi_reader.hanzi import count_chinese_chars
from hanzi_reader.pinyin import (
    align_pinyin,
    annotate_pinyin,
    is_pinyin_token,
    pypinyin_transliterate,
    word_pinyin,
)


def test_question_sentence_has_one_token_per_character():
    result = annotate_pinyin("你好吗？")
    tokens = result.split()
    assert tokens == ["nǐ", "hǎo", "ma"]
    assert all(is_pinyin_token(token) for token in tokens)
    assert annotate_pinyin("你好吗？") == result


def test_each_sentence_gets_as_many_tokens_as_characters():
    for sentence in ("我每天学习中文。", "他也学习中文。"):
        tokens = annotate_pinyin(sentence).split()
        assert len(tokens) == count_chinese_chars(sentence)
    assert len(annotate_pinyin("他也学习中文。").split()) == 6


def test_polyphonic_character_follows_its_phrase():
    assert annotate_pinyin("银行") == "yín háng"


def test_transliterator_units_keep_passthrough_runs():
    units = pypinyin_transliterate("我有3本书。")
    assert units[0] == "wǒ"
    assert "。" in units


def test_filter_drops_numbers_punctuation_and_long_latin_runs():
    def fake(text):
        return ["wǒ", "2024", "，", "Chinatown", "", "ài", "nǐ"]

    assert annotate_pinyin("我爱你", fake) == "wǒ ài nǐ"


def test_latin_text_next_to_chinese_gets_no_pinyin():
    result = annotate_pinyin("iPad很好。")
    assert result == "hěn hǎo"
    assert align_pinyin("iPad很好。", result)[4:6] == [("很", "hěn"), ("好", "hǎo")]


def test_only_chinese_runs_reach_the_transliterator():
    calls = []

    def recording(text):
        calls.append(text)
        return ["hěn", "hǎo", "extra"]

    assert annotate_pinyin("iPad很好。OK", recording) == "hěn hǎo"
    assert calls == ["很好"]


def test_extension_b_character_never_overcounts():
    sentence = "我\U00020000好"
    tokens = annotate_pinyin(sentence).split()
    assert tokens[0] == "wǒ"
    assert len(tokens) <= count_chinese_chars(sentence)
    assert all(is_pinyin_token(token) for token in tokens)
    assert [char for char, _ in align_pinyin(sentence, " ".join(tokens))] == list(sentence)


def test_transliterator_failure_returns_empty_string():
    def broken(text):
        raise RuntimeError("dictionary missing")

    assert annotate_pinyin("你好", broken) == ""
    assert word_pinyin("你好", broken) == ""


def test_word_pinyin_joins_units():
    assert word_pinyin("上映", lambda text: ["shàng", "yìng"]) == "shàng yìng"


def test_align_pinyin_pairs_chinese_characters_only():
    assert align_pinyin("你好，Tom！", "nǐ hǎo") == [
        ("你", "nǐ"),
        ("好", "hǎo"),
        ("，", ""),
        ("T", ""),
        ("o", ""),
        ("m", ""),
        ("！", ""),
    ]


def test_align_pinyin_tolerates_undercount_and_placeholders():
    assert align_pinyin("我爱\U00020000", "_ ài") == [
        ("我", ""),
        ("爱", "ài"),
        ("\U00020000", ""),
    ]
    assert align_pinyin("中文", "") == [("中", ""), ("文", "")]
