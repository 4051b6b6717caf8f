"""Tests for full-text tokenising and the word index."""

from divecore.dive import DiveSite, DiveTable
from divecore.fulltext import (
    FullTextIndex, FullTextQuery, StringFilterMode, dive_matches, normalize_word,
    tokenize,
)

from conftest import make_dive


def _log():
    site = DiveSite(uuid=7, name="Blue Hole")
    return DiveTable([
        make_dive(1, notes="<p>Saw a <b>Mola mola</b> near the wall</p>", buddy="Anna"),
        make_dive(2, notes="Strong current", buddy="Bjørn", dive_site=site),
        make_dive(3, suit="Drysuit", tags=["wreck", "night"]),
    ])


class TestTokenize:

    def test_normalisation(self):
        assert normalize_word("Épave") == "epave"

    def test_markup_is_dropped(self):
        assert tokenize("<b>Mola</b>&nbsp;mola") == ["mola", "mola"]
        assert tokenize("") == []

    def test_query_without_words(self):
        assert not FullTextQuery.from_string("  ").doit()
        assert FullTextQuery.from_string("mola").doit()


class TestIndex:

    def test_startswith(self):
        table = _log()
        index = FullTextIndex(table)
        result = index.find_dives(FullTextQuery.from_string("mol"), StringFilterMode.STARTSWITH)
        assert len(result) == 1
        assert result.dive_matches(table.get_dive_by_id(1))

    def test_all_words_must_match(self):
        table = _log()
        index = FullTextIndex(table)
        result = index.find_dives(FullTextQuery.from_string("blue current"),
                                  StringFilterMode.STARTSWITH)
        assert [d.id for d in table if result.dive_matches(d)] == [2]
        result = index.find_dives(FullTextQuery.from_string("blue wreck"),
                                  StringFilterMode.STARTSWITH)
        assert len(result) == 0

    def test_exact_and_substring(self):
        table = _log()
        index = FullTextIndex(table)
        assert len(index.find_dives(FullTextQuery.from_string("mol"), StringFilterMode.EXACT)) == 0
        assert len(index.find_dives(FullTextQuery.from_string("rysui"), StringFilterMode.SUBSTRING)) == 1

    def test_update_dive(self):
        table = _log()
        index = FullTextIndex(table)
        d = table.get_dive_by_id(3)
        d.notes = "manta"
        index.update_dive(d)
        query = FullTextQuery.from_string("manta")
        assert index.dive_matches(d, query, StringFilterMode.STARTSWITH)
        index.unregister_dive(d)
        assert len(index.find_dives(query, StringFilterMode.STARTSWITH)) == 0

    def test_unindexed_dive_is_checked_directly(self):
        index = FullTextIndex()
        d = make_dive(9, buddy="Chloé")
        query = FullTextQuery.from_string("chloe")
        assert index.dive_matches(d, query, StringFilterMode.EXACT)
        assert dive_matches(d, query, StringFilterMode.EXACT)
