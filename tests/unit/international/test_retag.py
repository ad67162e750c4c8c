"""Test text to segment splitting."""
from fx_tagger.international import retag as retag_module
from fx_tagger.international.retag import has_tags, retag
from fx_tagger.models.currency import CurrencyToken
from fx_tagger.models.matches import LiteralSegment, TaggedSegment


class TestRetag:
    def test_single_price(self, scanner):
        [seg] = retag("€89.99", scanner)
        assert isinstance(seg, TaggedSegment)
        assert seg.currency == CurrencyToken.EUR
        assert seg.amount == 89.99

    def test_alternating_segments(self, scanner):
        segments = retag("USD 45.00 and GBP 1,250.50", scanner)
        assert [type(s) for s in segments] == [TaggedSegment, LiteralSegment, TaggedSegment]
        assert segments[1].text == " and "
        assert segments[0].amount == 45.00
        assert segments[2].amount == 1250.50

    def test_text_preserved(self, scanner):
        text = "Price: €89.99 (was £1.234,56) plus USD 5 shipping."
        segments = retag(text, scanner)
        assert "".join(s.text for s in segments) == text

    def test_no_prices(self, scanner):
        segments = retag("Hello world, no prices here.", scanner)
        assert segments == [LiteralSegment(text="Hello world, no prices here.")]
        assert not has_tags(segments)

    def test_empty_text(self, scanner):
        assert retag("", scanner) == []

    def test_unparseable_match_stays_literal(self, scanner, monkeypatch):
        real = retag_module.normalize_amount

        def flaky(raw):
            if raw == "10":
                raise ValueError("bad amount")
            return real(raw)

        monkeypatch.setattr(retag_module, "normalize_amount", flaky)
        segments = retag("a €10 b €20 c", scanner)
        assert [type(s) for s in segments] == [LiteralSegment, TaggedSegment, LiteralSegment]
        assert segments[0].text == "a €10 b "
        assert segments[1].amount == 20.0
