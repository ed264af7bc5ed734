import pytest

from apprecom.experiments.base import prepare_observations


def make_records(pairs):
    return [
        {'pname': f"{pcat} place", 'pcat': pcat, 'aname': f"{acat} app", 'acat': acat}
        for pcat, acat in pairs
    ]


@pytest.fixture
def example_records():
    """5x(cafe, maps), 3x(cafe, weather), 2x(gym, fitness) in that order."""
    pairs = [('cafe', 'maps')] * 5 + [('cafe', 'weather')] * 3 + [('gym', 'fitness')] * 2
    return make_records(pairs)


@pytest.fixture
def example_frame(example_records):
    return prepare_observations(example_records)
