from apprecom.experiments.config import (
    AppRecomConfig, DataConfig, MiningConfig, ValidationConfig, StoreConfig
)


def test_defaults():
    config = AppRecomConfig.default()

    assert config.mining.min_support == 0.02
    assert config.mining.min_confidence == 0.8
    assert config.mining.direction == 'location_to_app'
    assert config.validation.test_ratio == 0.8
    assert config.validation.rounds == 5
    assert config.validation.enabled is True


def test_save_and_load(tmp_path):
    config = AppRecomConfig(
        mining=MiningConfig(min_support=0.1, min_confidence=0.6, direction='first_match'),
        validation=ValidationConfig(test_ratio=0.7, rounds=3, random_state=11),
        store=StoreConfig(directory='rules', filename='table.json')
    )
    path = tmp_path / 'config.json'

    config.save(path)

    assert AppRecomConfig.load(path) == config


def test_from_dict_fills_defaults():
    config = AppRecomConfig.from_dict({'mining': {'min_confidence': 0.5}})

    assert config.mining.min_confidence == 0.5
    assert config.mining.min_support == 0.02
    assert config.validation == ValidationConfig()
    assert config.store == StoreConfig()


def test_store_path():
    assert StoreConfig(directory='out', filename='r.json').get_path().as_posix() == 'out/r.json'


def test_data_config():
    config = DataConfig(path='data.csv', name='usage')

    assert config.get_category_cols() == ['pcat', 'acat']
    assert config.to_dict()['location_col'] == 'pcat'
