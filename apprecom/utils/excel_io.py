import pandas as pd
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any, Union

from apprecom.rule_mining.base import Rule


def save_training_results(
    result,
    output_path: Union[str, Path],
    parameters: Dict[str, Any] = None,
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save a training run to Excel with multiple sheets.

    Sheets:
        - Rules: Every mined rule with count, confidence and support
        - Rule Table: Ranked app categories per location category
        - Validation: Per-round cross-validation results (if validated)
        - Summary: Mining statistics and the mean error rate
        - Parameters: Thresholds and validation settings

    Args:
        result: TrainingResult from AppRecom.train
        output_path: Output file path (will add .xlsx if needed)
        parameters: Parameters to record; defaults to result.parameters
        metadata: Additional metadata (dataset name, timestamp, etc.)
    """
    output_path = Path(output_path)
    if output_path.suffix != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    parameters = parameters if parameters is not None else result.parameters

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        # Sheet 1: Rules
        rules_df = pd.DataFrame(
            [format_rule_for_excel(rule) for rule in result.rules],
            columns=['rule', 'hypothesis', 'conclusion', 'count', 'confidence', 'support']
        )
        rules_df.to_excel(writer, sheet_name='Rules', index=False)

        # Sheet 2: Rule Table
        table_rows = [
            {'location_category': hypothesis, 'rank': rank, 'app_category': conclusion}
            for hypothesis, conclusions in result.rule_table.items()
            for rank, conclusion in enumerate(conclusions, 1)
        ]
        table_df = pd.DataFrame(table_rows, columns=['location_category', 'rank', 'app_category'])
        table_df.to_excel(writer, sheet_name='Rule Table', index=False)

        # Sheet 3: Validation
        if result.validation is not None:
            rounds_df = pd.DataFrame([r.to_dict() for r in result.validation.rounds])
            rounds_df.to_excel(writer, sheet_name='Validation', index=False)

        # Sheet 4: Summary
        summary_data = {
            'Metric': list(result.stats.keys()),
            'Value': list(result.stats.values())
        }
        if result.validation is not None:
            summary_data['Metric'].append('mean_error_rate')
            summary_data['Value'].append(result.validation.mean_error_rate)
        if metadata:
            summary_data['Metric'].extend(list(metadata.keys()))
            summary_data['Value'].extend(list(metadata.values()))
        summary_df = pd.DataFrame({
            'Metric': summary_data['Metric'],
            'Value': [str(v) for v in summary_data['Value']]
        })
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

        # Sheet 5: Parameters
        if parameters:
            params_df = pd.DataFrame({
                'Parameter': list(parameters.keys()),
                'Value': [str(v) for v in parameters.values()]
            })
            params_df.to_excel(writer, sheet_name='Parameters', index=False)

    print(f"Results saved to: {output_path}")
    return output_path


def format_rule_for_excel(rule: Rule) -> Dict[str, Any]:
    """
    Flatten a rule into one spreadsheet row with a readable "IF x THEN y" column.
    """
    row = rule.to_dict()
    row['rule'] = f"IF {rule.hypothesis} THEN {rule.conclusion}"
    row['confidence'] = round(rule.confidence, 4)
    row['support'] = round(rule.support, 4)
    return row


def save_rules_text(
    rules: List[Rule],
    output_path: Union[str, Path],
    title: str = "MINED RULES",
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save rules in human-readable text format, grouped by hypothesis.

    Args:
        rules: Mined rules
        output_path: Output file path (will add .txt if needed)
        title: Title for the output file header
        metadata: Optional metadata to include in header
    """
    output_path = Path(output_path)
    if output_path.suffix != '.txt':
        output_path = output_path.with_suffix('.txt')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write("=" * 80 + "\n")
        f.write(f"{title}\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        if metadata:
            for key, val in metadata.items():
                f.write(f"{key}: {val}\n")
        f.write("=" * 80 + "\n\n")

        if not rules:
            f.write("No rules found.\n")
            print(f"Rules saved to: {output_path}")
            return output_path

        groups: Dict[str, List[Rule]] = {}
        for rule in rules:
            groups.setdefault(rule.hypothesis, []).append(rule)

        rule_num = 1
        for hypothesis, group_rules in groups.items():
            f.write("-" * 80 + "\n")
            f.write(f"HYPOTHESIS: {hypothesis}\n")
            f.write(f"Rules in group: {len(group_rules)}\n")
            f.write("-" * 80 + "\n\n")

            for rule in group_rules:
                f.write(f"Rule #{rule_num}:\n")
                f.write(f"  IF {rule.hypothesis}\n")
                f.write(f"  THEN {rule.conclusion}\n\n")
                f.write(f"    {'Count':18s} {rule.count}\n")
                f.write(f"    {'Confidence':18s} {rule.confidence:.4f}\n")
                f.write(f"    {'Support':18s} {rule.support:.4f}\n\n")
                rule_num += 1
            f.write("\n")

        f.write("=" * 80 + "\n")
        f.write(f"Total rules: {len(rules)}\n")
        f.write("=" * 80 + "\n")

    print(f"Rules saved to: {output_path}")
    return output_path
