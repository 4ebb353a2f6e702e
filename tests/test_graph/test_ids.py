"""Tests for node id generation."""

from flowbridge.graph import IdGenerator, extract_prefix


class TestIdGenerator:
    def test_counter_per_base(self):
        gen = IdGenerator("fp")
        assert gen.generate("hero") == "fp-hero-001"
        assert gen.generate("hero") == "fp-hero-002"
        assert gen.generate("card") == "fp-card-001"

    def test_default_base(self):
        assert IdGenerator().generate() == "wf-node-001"

    def test_reset(self):
        gen = IdGenerator("x")
        gen.generate("a")
        gen.reset()
        assert gen.generate("a") == "x-a-001"

    def test_deterministic(self):
        a, b = IdGenerator("p"), IdGenerator("p")
        assert [a.generate("n") for _ in range(3)] == [b.generate("n") for _ in range(3)]


class TestExtractPrefix:
    def test_prefix(self):
        assert extract_prefix("fp-hero") == "fp"

    def test_lowercased(self):
        assert extract_prefix("FP-Hero") == "fp"

    def test_no_dash(self):
        assert extract_prefix("hero") is None

    def test_empty(self):
        assert extract_prefix(None) is None
        assert extract_prefix("") is None

    def test_digits_not_prefix(self):
        assert extract_prefix("123-x") is None
