from dataclasses import dataclass, field

from hanzi_reader import translate as translate_module
from hanzi_reader.llm import ChatClient
from hanzi_reader.translate import (
    TRANSLATION_UNAVAILABLE,
    ChatDictionaryStrategy,
    GoogleTranslateStrategy,
    TranslationStrategy,
    sentence_strategies,
    translate_sentence,
    translate_text,
    translate_with_strategies,
    word_strategies,
)


@dataclass
class FixedStrategy(TranslationStrategy):
    reply: str = ""
    error: Exception | None = None
    calls: list = field(default_factory=list)

    def translate(self, text, source, target):
        self.calls.append((text, source, target))
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class DictionaryClient(ChatClient):
    reply: str = ""
    calls: list = field(default_factory=list)

    def complete(self, system, user, temperature=0.3):
        self.calls.append((system, user, temperature))
        return self.reply


def test_first_successful_strategy_wins():
    failing = FixedStrategy(error=RuntimeError("offline"))
    empty = FixedStrategy(reply="  ")
    working = FixedStrategy(reply=" I study Chinese every day. ")
    never = FixedStrategy(reply="unused")

    result = translate_with_strategies("我每天学习中文。", [failing, empty, working, never])

    assert result == "I study Chinese every day."
    assert failing.calls == [("我每天学习中文。", "zh-CN", "en")]
    assert never.calls == []


def test_sentence_translation_placeholder_when_all_fail():
    strategies = [FixedStrategy(error=RuntimeError("offline")), FixedStrategy(reply="")]
    assert translate_sentence("你好。", strategies) == TRANSLATION_UNAVAILABLE
    assert translate_sentence("你好。", []) == TRANSLATION_UNAVAILABLE


def test_non_text_reply_counts_as_a_failed_strategy():
    silent = FixedStrategy(reply=None)
    working = FixedStrategy(reply="Hello.")

    assert translate_sentence("你好。", [silent]) == TRANSLATION_UNAVAILABLE
    assert translate_sentence("你好。", [silent, working]) == "Hello."
    assert translate_text("你好", [FixedStrategy(reply=["hello"])]) == ""


def test_word_translation_falls_back_to_empty_string():
    assert translate_text("上映", [FixedStrategy(error=RuntimeError("offline"))]) == ""


def test_chat_dictionary_only_handles_chinese_to_english():
    client = DictionaryClient(reply="to show (a movie) / to screen")
    strategy = ChatDictionaryStrategy(client=client)
    fallback = FixedStrategy(reply="montrer")

    assert translate_text("上映", [strategy, fallback]) == "to show (a movie) / to screen"
    assert translate_text("上映", [strategy, fallback], target="fr") == "montrer"
    assert len(client.calls) == 1
    system, user, temperature = client.calls[0]
    assert "dictionary" in system
    assert "上映" in user
    assert temperature == 0.1


def test_google_strategy_uses_deep_translator(monkeypatch):
    created = []

    class FakeGoogleTranslator:
        def __init__(self, source, target):
            created.append((source, target))

        def translate(self, text):
            return f"translated {text}"

    monkeypatch.setattr(translate_module, "GoogleTranslator", FakeGoogleTranslator)

    assert translate_sentence("你好。", [GoogleTranslateStrategy()]) == "translated 你好。"
    assert created == [("zh-CN", "en")]


def test_google_strategy_failure_becomes_placeholder(monkeypatch):
    class BrokenGoogleTranslator:
        def __init__(self, source, target):
            pass

        def translate(self, text):
            raise ConnectionError("no route to host")

    monkeypatch.setattr(translate_module, "GoogleTranslator", BrokenGoogleTranslator)

    assert translate_sentence("你好。", [GoogleTranslateStrategy()]) == TRANSLATION_UNAVAILABLE


def test_default_strategy_chains():
    client = DictionaryClient()
    assert [type(s) for s in sentence_strategies()] == [GoogleTranslateStrategy]
    assert [type(s) for s in word_strategies(client)] == [
        ChatDictionaryStrategy,
        GoogleTranslateStrategy,
    ]
    assert [type(s) for s in word_strategies(None)] == [GoogleTranslateStrategy]
