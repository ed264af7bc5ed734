import logging

import pytest

from apprecom.exceptions import InvalidInputError
from apprecom.experiments.base import prepare_observations
from apprecom.rule_mining.base import Direction, Itemset, Rule
from apprecom.rule_mining.category_miner import CategoryRuleMiner, generate_rules
from apprecom.rule_mining.itemsets import count_itemsets

from conftest import make_records


def test_worked_example(example_frame):
    miner = CategoryRuleMiner(min_support=0.2, min_confidence=0.6)

    rule_table, rules, stats = miner.mine_rule_table(example_frame)

    assert rule_table == {'cafe': ['maps'], 'gym': ['fitness']}
    assert rules == [
        Rule('cafe', 'maps', 5, confidence=0.625, support=0.5),
        Rule('gym', 'fitness', 2, confidence=1.0, support=0.2),
    ]
    assert stats['num_itemsets'] == 3
    assert stats['num_frequent_itemsets'] == 3
    assert stats['num_rules'] == 2
    assert stats['num_hypotheses'] == 2
    assert stats['direction'] == 'location_to_app'


def test_confidence_boundary_is_inclusive(example_frame):
    counts = count_itemsets(example_frame)

    at_boundary = generate_rules(example_frame, counts, 0.625)
    above_boundary = generate_rules(example_frame, counts, 0.626)

    assert Rule('cafe', 'maps', 5, confidence=0.625, support=0.5) in at_boundary
    assert [r.conclusion for r in above_boundary] == ['fitness']


def test_frequencies_come_from_whole_dataset(example_frame):
    # Only (cafe, maps) is passed in; cafe still has frequency 8
    rules = generate_rules(example_frame, {Itemset('cafe', 'maps'): 5}, 0.6)

    assert rules[0].confidence == pytest.approx(5 / 8)


def test_first_match_emits_reverse_only_when_forward_fails(example_frame):
    miner = CategoryRuleMiner(min_support=0.2, min_confidence=0.6, direction='first_match')

    rule_table, rules, _ = miner.mine_rule_table(example_frame)

    assert rule_table == {'cafe': ['maps'], 'weather': ['cafe'], 'gym': ['fitness']}
    # maps -> cafe (8/5) would qualify, but cafe -> maps already did
    assert all(r.hypothesis != 'maps' for r in rules)
    assert len(rules) == 3
    assert Rule('weather', 'cafe', 3, confidence=8 / 3, support=0.3) in rules


def test_location_to_app_never_emits_reverse(example_frame):
    rules = generate_rules(
        example_frame, count_itemsets(example_frame), 0.6, Direction.LOCATION_TO_APP
    )

    assert {r.hypothesis for r in rules} == {'cafe', 'gym'}


def test_default_direction_is_location_to_app(example_frame):
    default = CategoryRuleMiner(min_support=0.2, min_confidence=0.6)
    first_match = CategoryRuleMiner(min_support=0.2, min_confidence=0.6, direction='first_match')

    assert default.direction is Direction.LOCATION_TO_APP
    assert default.mine_rule_table(example_frame)[0] == {'cafe': ['maps'], 'gym': ['fitness']}
    assert 'weather' in first_match.mine_rule_table(example_frame)[0]


def test_ranking_ties_keep_first_seen_order():
    frame = prepare_observations(make_records(
        [('a', 'x')] * 2 + [('a', 'y')] * 3 + [('a', 'z')] * 2
    ))
    miner = CategoryRuleMiner(min_support=0.0, min_confidence=0.0)

    rule_table, _, _ = miner.mine_rule_table(frame)

    assert rule_table == {'a': ['y', 'x', 'z']}


def test_support_pruning_happens_before_rules(example_frame):
    miner = CategoryRuleMiner(min_support=0.25, min_confidence=0.0)

    itemsets, stats = miner.mine_itemsets(example_frame)
    rule_table, _, _ = miner.mine_rule_table(example_frame)

    assert list(itemsets) == [Itemset('cafe', 'maps'), Itemset('cafe', 'weather')]
    assert stats['num_itemsets'] == 3
    assert rule_table == {'cafe': ['maps', 'weather']}


def test_mining_is_deterministic(example_frame):
    miner = CategoryRuleMiner(min_support=0.1, min_confidence=0.3)

    first = miner.mine_rule_table(example_frame)
    second = miner.mine_rule_table(example_frame)

    assert first[0] == second[0]
    assert first[1] == second[1]


def test_empty_data_is_invalid():
    miner = CategoryRuleMiner()

    with pytest.raises(InvalidInputError):
        miner.mine_rules(prepare_observations([]))


@pytest.mark.parametrize("kwargs", [
    {'min_support': -0.01},
    {'min_support': 1.01},
    {'min_confidence': -1},
    {'min_confidence': 2},
    {'direction': 'both'},
    {'min_support': '0.5'},
    {'min_support': None},
    {'min_confidence': float('nan')},
    {'min_confidence': True},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(InvalidInputError):
        CategoryRuleMiner(**kwargs)


def test_logger_checkpoints(example_frame, caplog):
    logger = logging.getLogger('apprecom.test')
    miner = CategoryRuleMiner(min_support=0.2, min_confidence=0.6, logger=logger)

    with caplog.at_level(logging.DEBUG, logger='apprecom.test'):
        miner.mine_rule_table(example_frame)

    messages = [r.getMessage() for r in caplog.records if r.name == 'apprecom.test']
    assert messages[0].startswith("Counted 3 distinct itemsets")
    assert messages[1].startswith("Kept 3/3 itemsets")
    assert messages[2].startswith("Derived 2 rules")
    assert messages[3] == "Aggregated rules for 2 hypothesis categories"


def test_repr():
    assert repr(CategoryRuleMiner(0.1, 0.5)) == (
        "CategoryRuleMiner(min_support=0.1, min_confidence=0.5, direction='location_to_app')"
    )
