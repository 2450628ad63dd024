"""Speech decoding: gram + speech tree -> flat messages."""

import pytest

from hall_client.decoder import decode_gram, decode_speech
from hall_client.models.gram import Gram
from hall_client.models.message import MessageStyle
from hall_client.models.speech import parse_speech

UID = "0v2.ucgbe.9uhbr.7f1qs.8l3sd.5q4f6"
WEN = 1514400480000


def make_gram(sep, num=5, uid=UID):
    return Gram.model_validate({
        "num": num,
        "gam": {"uid": uid, "aut": "marzod", "wen": WEN, "aud": ["~zod/inbox"], "sep": sep},
    })


def lin(msg, pat=False):
    return {"lin": {"msg": msg, "pat": pat}}


class TestTerminalSpeeches:
    def test_lin(self):
        [m] = decode_gram(make_gram(lin("hello")))
        assert m.text == "hello"
        assert m.style == MessageStyle.MESSAGE
        assert m.type == "lin"
        assert m.key == UID
        assert m.date == WEN
        assert m.sender == "marzod"
        assert m.audience == ["~zod/inbox"]
        assert m.num == 5
        assert m.attachment is None

    def test_lin_action(self):
        [m] = decode_gram(make_gram(lin("waves", pat=True)))
        assert m.style == MessageStyle.ACT

    def test_lin_without_pat(self):
        [m] = decode_gram(make_gram({"lin": {"msg": "hi"}}))
        assert m.style == MessageStyle.MESSAGE

    def test_empty_text_becomes_space(self):
        [m] = decode_gram(make_gram(lin("")))
        assert m.text == " "

    def test_url(self):
        [m] = decode_gram(make_gram({"url": "https://urbit.org"}))
        assert m.text == "https://urbit.org"
        assert m.style == MessageStyle.URL
        assert m.type == "url"

    def test_exp(self):
        [m] = decode_gram(make_gram({"exp": {"exp": "(add 2 2)", "res": [["4"], ["a", "b"]]}}))
        assert m.text == "(add 2 2)"
        assert m.attachment == "4\na\nb"
        assert m.style == MessageStyle.CODE
        assert m.type == "exp"

    def test_exp_without_result(self):
        [m] = decode_gram(make_gram({"exp": {"exp": "now"}}))
        assert m.attachment == ""


class TestWrappers:
    def test_app_prefixes_and_takes_next_serial(self):
        [m] = decode_gram(make_gram({"app": {"app": "talk", "sep": lin("hello")}}))
        assert m.text == "[talk]: hello"
        assert m.key == 6
        assert m.type == "lin"
        assert m.style == MessageStyle.MESSAGE
        assert m.num == 5

    def test_app_keeps_inner_style(self):
        [m] = decode_gram(make_gram({"app": {"app": "talk", "sep": lin("waves", pat=True)}}))
        assert m.style == MessageStyle.ACT
        assert m.text == "[talk]: waves"

    def test_app_serial_from_override(self):
        gram = make_gram(lin("x"))
        speech = parse_speech({"app": {"app": "a", "sep": lin("x")}})
        [m] = decode_speech(gram, speech, serial=10)
        assert m.key == 11

    def test_fat_text_attachment(self):
        sep = {"fat": {"tac": {"text": "long text"}, "sep": lin("see attached")}}
        messages = decode_gram(make_gram(sep))
        assert len(messages) == 1
        [m] = messages
        assert m.type == "fat"
        assert m.key == UID
        assert m.text == "see attached"
        assert m.attachment == "long text"
        assert m.style == MessageStyle.MESSAGE

    def test_fat_prefers_text_over_tank(self):
        sep = {"fat": {"tac": {"text": "t", "tank": ["x", "y"]}, "sep": lin("m")}}
        [m] = decode_gram(make_gram(sep))
        assert m.attachment == "t"

    def test_fat_tank(self):
        sep = {"fat": {"tac": {"tank": ["line 1", "line 2"]}, "sep": lin("m")}}
        [m] = decode_gram(make_gram(sep))
        assert m.attachment == "line 1\nline 2"
        assert m.attachment_label is None

    def test_fat_named_attachment(self):
        sep = {"fat": {"tac": {"name": {"nom": "notes", "tac": {"text": "inner"}}}, "sep": lin("m")}}
        [m] = decode_gram(make_gram(sep))
        assert m.attachment == "inner"
        assert m.attachment_label == "notes"

    def test_fat_without_attachment(self):
        [m] = decode_gram(make_gram({"fat": {"sep": lin("m")}}))
        assert m.attachment is None
        assert m.text == "m"

    def test_fat_nested_tank(self):
        sep = {"fat": {"tac": {"tank": [["line 1"], ["line 2"]]}, "sep": lin("see attached")}}
        [m] = decode_gram(make_gram(sep))
        assert m.type == "fat"
        assert m.text == "see attached"
        assert m.attachment == "line 1\nline 2"

    @pytest.mark.parametrize("tac", [{"text": 5}, "not a mapping", {"name": "notes"}])
    def test_fat_bad_attachment_keeps_inner_speech(self, tac):
        [m] = decode_gram(make_gram({"fat": {"tac": tac, "sep": lin("see attached")}}))
        assert m.type == "fat"
        assert m.text == "see attached"
        assert m.attachment is None

    def test_fat_over_app(self):
        sep = {"fat": {"tac": {"text": "body"}, "sep": {"app": {"app": "bot", "sep": lin("hi")}}}}
        [m] = decode_gram(make_gram(sep))
        assert m.type == "fat"
        assert m.key == UID
        assert m.text == "[bot]: hi"
        assert m.attachment == "body"

    def test_app_over_fat(self):
        sep = {"app": {"app": "bot", "sep": {"fat": {"tac": {"text": "body"}, "sep": lin("hi")}}}}
        [m] = decode_gram(make_gram(sep))
        assert m.type == "fat"
        assert m.key == 6
        assert m.text == "[bot]: hi"
        assert m.attachment == "body"

    def test_ire_keeps_serial(self):
        [m] = decode_gram(make_gram({"ire": {"top": "0v1.abc", "sep": lin("reply")}}))
        assert m.text == "reply"
        assert m.key == UID
        assert m.type == "lin"

    def test_ire_inside_app(self):
        sep = {"app": {"app": "talk", "sep": {"ire": {"top": "0v1.abc", "sep": lin("reply")}}}}
        [m] = decode_gram(make_gram(sep))
        assert m.key == 6
        assert m.text == "[talk]: reply"


class TestUnhandled:
    def test_unknown_tag(self):
        [m] = decode_gram(make_gram({"mor": [lin("a"), lin("b")]}))
        assert m.text == "Unhandled speech: %mor"
        assert m.type == "mor"
        assert m.style == MessageStyle.MESSAGE

    def test_malformed_known_tag(self):
        [m] = decode_gram(make_gram({"lin": "not a mapping"}))
        assert m.text == "Unhandled speech: %lin"
        assert m.type == "lin"

    def test_missing_speech(self):
        [m] = decode_gram(make_gram(None))
        assert m.text.startswith("Unhandled speech: %")

    def test_wrapper_with_missing_inner(self):
        [m] = decode_gram(make_gram({"app": {"app": "talk"}}))
        assert m.text == "[talk]: Unhandled speech: %"


@pytest.mark.parametrize("sep", [
    lin(""),
    {"lin": {}},
    {"url": ""},
    {"exp": {}},
    {"app": {"app": "", "sep": lin("")}},
    {"fat": {"tac": {}, "sep": lin("")}},
    {"ire": {"sep": {"url": None}}},
    {"zzz": None},
    {},
])
def test_text_never_empty(sep):
    messages = decode_gram(make_gram(sep))
    assert messages
    for m in messages:
        assert m.text
        assert m.style
        assert m.type is not None
