import numpy as np
import pytest

from apprecom.exceptions import InvalidInputError
from apprecom.experiments.base import prepare_observations
from apprecom.experiments.cross_validation import (
    CrossValidator, RoundResult, evaluate_rule_table, error_rate, round_half_up
)

from conftest import make_records


def identity(indices):
    return indices


def make_validator(**kwargs):
    params = {'min_support': 0.2, 'min_confidence': 0.6, 'rounds': 3}
    params.update(kwargs)
    return CrossValidator(**params)


@pytest.mark.parametrize("length,ratio,expected", [
    (10, 0.8, 9),
    (10, 0.5, 6),
    (5, 0.5, 4),    # 2.5 rounds half up
    (1, 0.8, 1),    # never more than the data holds
    (4, 0.9, 4),
])
def test_training_size(length, ratio, expected):
    assert make_validator(test_ratio=ratio).training_size(length) == expected


def test_split_follows_shuffle(example_frame):
    validator = make_validator(test_ratio=0.5, shuffle=lambda idx: idx[::-1])

    train, test = validator.split(example_frame)

    assert len(train) == 6
    assert len(test) == 4
    assert list(train['app_category']) == ['fitness', 'fitness', 'weather', 'weather', 'weather', 'maps']
    assert list(test['app_category']) == ['maps'] * 4


def test_evaluate_rule_table_skips_unknown_locations():
    test = prepare_observations(make_records([
        ('cafe', 'maps'), ('cafe', 'weather'), ('gym', 'fitness'), ('cafe', 'maps')
    ]))

    assert evaluate_rule_table({'cafe': ['maps']}, test) == (3, 1)
    assert evaluate_rule_table({}, test) == (0, 0)


def test_error_rate():
    assert error_rate(0, 0) == 0.0
    assert error_rate(3, 1) == 0.33
    assert error_rate(3, 2) == 0.67
    assert error_rate(4, 4) == 1.0


def test_round_half_up():
    assert round_half_up(0.125) == 0.13
    assert round_half_up(0.5) == 0.5
    assert round_half_up(1 / 3) == 0.33


def test_run_with_stubbed_shuffle(example_frame):
    validator = make_validator(test_ratio=0.5, shuffle=identity)

    report = validator.run(example_frame)

    # Train on 5x(cafe, maps) + 1x(cafe, weather): table {cafe: [maps]}
    # Test 2x(cafe, weather) are unexplained, gym is not considered
    expected = RoundResult(round=1, train_size=6, test_size=4, considered=2, unexplained=2, error_rate=1.0)
    assert report.rounds[0] == expected
    assert [r.round for r in report.rounds] == [1, 2, 3]
    assert report.mean_error_rate == 1.0


def test_round_without_considered_observations_counts_as_zero(example_frame):
    # Train on all cafe rows, test on gym rows only
    validator = make_validator(test_ratio=0.7, shuffle=identity)

    report = validator.run(example_frame)

    assert all(r.considered == 0 and r.error_rate == 0.0 for r in report.rounds)
    assert report.mean_error_rate == 0.0


def test_mean_over_rounds(example_frame):
    permutations = iter([
        np.arange(10),
        np.array([5, 6, 7, 0, 1, 2, 3, 4, 8, 9]),
    ])
    validator = make_validator(test_ratio=0.5, rounds=2, shuffle=lambda idx: next(permutations))

    report = validator.run(example_frame)

    assert [r.error_rate for r in report.rounds] == [1.0, 0.0]
    assert report.mean_error_rate == 0.5


def test_stubbed_shuffle_is_reproducible(example_frame):
    first = make_validator(shuffle=lambda idx: idx[::-1]).run(example_frame)
    second = make_validator(shuffle=lambda idx: idx[::-1]).run(example_frame)

    assert first == second
    assert first.rounds[0].error_rate == first.rounds[1].error_rate == first.rounds[2].error_rate


def test_seeded_shuffle_is_reproducible(example_frame):
    first = make_validator(random_state=7, rounds=5).run(example_frame)
    second = make_validator(random_state=7, rounds=5).run(example_frame)

    assert first == second
    assert 0.0 <= first.mean_error_rate <= 1.0
    assert all(r.train_size + r.test_size == 10 for r in first.rounds)


def test_validation_leaves_data_untouched(example_frame):
    before = example_frame.copy()

    make_validator(random_state=1).run(example_frame)

    assert example_frame.equals(before)


def test_progress_bar(example_frame):
    report = make_validator(shuffle=identity, show_progress=True).run(example_frame)

    assert len(report.rounds) == 3


def test_report_to_dict(example_frame):
    report = make_validator(test_ratio=0.5, rounds=1, shuffle=identity).run(example_frame)

    assert report.to_dict() == {
        'rounds': [{
            'round': 1, 'train_size': 6, 'test_size': 4,
            'considered': 2, 'unexplained': 2, 'error_rate': 1.0
        }],
        'mean_error_rate': 1.0
    }


@pytest.mark.parametrize("kwargs", [
    {'test_ratio': 0.0},
    {'test_ratio': 1.0},
    {'rounds': 0},
    {'min_support': 1.2},
    {'min_confidence': -0.2},
    {'direction': 'sideways'},
    {'test_ratio': None},
    {'test_ratio': '0.5'},
    {'test_ratio': float('nan')},
    {'rounds': None},
    {'rounds': 2.5},
    {'rounds': True},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(InvalidInputError):
        make_validator(**kwargs)


def test_empty_data_is_invalid():
    with pytest.raises(InvalidInputError):
        make_validator().run(prepare_observations([]))
