"""Cross-source deduplication"""

from conftest import make_candidate
from rankings.ingestion.dedup import deduplicate


class TestDeduplicate:
    """Test canonical-key deduplication"""

    def test_keys_are_unique(self):
        batch = [
            make_candidate("Jordan Smith"),
            make_candidate("Jordan Smith", source="247sports"),
            make_candidate("Bryce Underwood"),
            make_candidate("JORDAN SMITH", source="espn-markdown"),
        ]
        unique = deduplicate(batch)
        keys = [c.canonical_key for c in unique]
        assert len(keys) == len(set(keys))
        assert [c.athlete_name for c in unique] == ["Jordan Smith", "Bryce Underwood"]

    def test_earlier_source_wins_intact(self):
        first = make_candidate("Jordan Smith", source="maxpreps", overall_rank=3, state="GA")
        later = make_candidate("Jordan Smith", source="247sports", overall_rank=1, state="FL", weight=200)
        unique = deduplicate([first, later])
        assert unique == [first]
        assert unique[0].weight is None

    def test_different_year_or_sport_kept(self):
        batch = [
            make_candidate("Jordan Smith"),
            make_candidate("Jordan Smith", graduation_year=2027),
            make_candidate("Jordan Smith", sport="basketball"),
        ]
        assert len(deduplicate(batch)) == 3

    def test_empty(self):
        assert deduplicate([]) == []

    def test_canonical_key_format(self):
        assert make_candidate("Jordan Smith").canonical_key == "jordan smith_2026_football"
