"""
Training Experiment: Location -> App Category Rules

Loads observations, cross-validates the rule miner, trains the final rule
table over all observations, persists it and exports the run to Excel.
"""
import argparse
import asyncio
import logging
from datetime import datetime
from pathlib import Path

from apprecom.experiments.base import load_observations
from apprecom.experiments.config import AppRecomConfig, DataConfig
from apprecom.recommender import AppRecom
from apprecom.storage.rule_store import JsonRuleStore
from apprecom.utils.excel_io import save_training_results, save_rules_text

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

# =============================================================================
# CONFIGURATION
# =============================================================================

DATA_PATH = "../../data/raw/location_app_usage.csv"
OUTPUT_DIR = "../../out/apprecom"
CONFIG_PATH = None  # JSON file with AppRecomConfig fields, overrides defaults

# Example locations to show recommendations for once training is done
SAMPLE_LOCATIONS = ['cafe', 'gym', 'library']


# =============================================================================
# EXPERIMENT
# =============================================================================

async def run_experiment(data_path: str, output_dir: str, config: AppRecomConfig):
    print("=" * 70)
    print("APP CATEGORY RULE TRAINING")
    print("=" * 70)

    # Load data
    print("\n[1] Loading data...")
    data_config = DataConfig(path=data_path, name=Path(data_path).stem)
    observations = load_observations(data_config)
    print(f"  Observations: {len(observations)}")

    # Train
    print("\n[2] Training...")
    print(f"  min_support={config.mining.min_support}, "
          f"min_confidence={config.mining.min_confidence}, "
          f"direction={config.mining.direction}")
    store = JsonRuleStore.from_config(config.store)
    recom = AppRecom(store=store, config=config)
    result = await recom.train(observations, location_col='location_category', app_col='app_category')

    if result.validation is not None:
        for r in result.validation.rounds:
            print(f"    Round {r.round}: unknown rate {r.error_rate:.2f} "
                  f"({r.unexplained}/{r.considered}, train={r.train_size}, test={r.test_size})")
        print(f"  Average unknown rate: {result.validation.mean_error_rate:.2f}")

    print(f"  Rules: {len(result.rules)} for {len(result.rule_table)} location categories")
    print(f"  Saved to: {store.path}")

    # Save results
    print("\n[3] Saving results...")
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    filename = f"{timestamp}_{data_config.name}_apprecom"

    metadata = {'dataset': data_config.name, 'timestamp': datetime.now().isoformat()}
    save_training_results(result, output_path / filename, metadata=metadata)
    save_rules_text(list(result.rules), output_path / filename, metadata=metadata)

    # Recommendations
    print("\n[4] Sample recommendations...")
    recommendations = await recom.recommend_many(SAMPLE_LOCATIONS)
    for location, apps in recommendations.items():
        print(f"  {location}: {apps if apps else 'no rules'}")

    print(f"\n{'=' * 70}")
    print("EXPERIMENT COMPLETE")
    print("=" * 70)
    return result


def main():
    parser = argparse.ArgumentParser(description="Train location -> app category rules")
    parser.add_argument("--data", default=DATA_PATH, help="CSV/Excel/Parquet/JSON observations")
    parser.add_argument("--output-dir", default=OUTPUT_DIR)
    parser.add_argument("--config", default=CONFIG_PATH, help="JSON configuration file")
    args = parser.parse_args()

    config = AppRecomConfig.load(args.config) if args.config else AppRecomConfig.default()
    asyncio.run(run_experiment(args.data, args.output_dir, config))


if __name__ == '__main__':
    main()
