from dataclasses import dataclass

from src.payroll_portal.payroll_portal.payroll.ranking import TeamRanking


@dataclass
class Doc:
    team_id: str
    tag: str = ""


def test_ranked_teams_first_then_unranked_in_original_order():
    ranking = TeamRanking()
    docs = [Doc("C"), Doc("W"), Doc("zzz"), Doc("J")]

    assert [d.team_id for d in ranking.sort(docs)] == ["W", "J", "C", "zzz"]


def test_unranked_teams_keep_relative_order():
    ranking = TeamRanking(["A"])
    docs = [Doc("y", "1"), Doc("x", "2"), Doc("A"), Doc("y", "3")]

    assert [(d.team_id, d.tag) for d in ranking.sort(docs)] == [("A", ""), ("y", "1"), ("x", "2"), ("y", "3")]


def test_unranked_sentinel_is_greater_than_all_ranks():
    ranking = TeamRanking(["a", "b", "c"])

    assert ranking.rank("a") == 0
    assert ranking.rank("c") == 2
    assert ranking.rank("nope") == 3
    assert ranking.unranked > max(ranking.ranks.values())


def test_duplicate_entries_keep_first_rank():
    ranking = TeamRanking(["a", "b", "a"])

    assert ranking.ranks == {"a": 0, "b": 1}


def test_from_setting_parses_comma_list_and_falls_back_to_default():
    assert TeamRanking.from_setting(" x, y ,").ranks == {"x": 0, "y": 1}
    assert TeamRanking.from_setting("").ranks == TeamRanking().ranks
